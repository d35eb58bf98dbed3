"""Layered configuration: bundled defaults, project YAML, env overrides."""
from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config
from .domains import FeaturesConfig, LoggingConfig, MigrationConfig
from .manager import ConfigManager, get_project_config_dir

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "FeaturesConfig",
    "LoggingConfig",
    "MigrationConfig",
    "clear_all_caches",
    "get_cached_config",
    "get_project_config_dir",
]
