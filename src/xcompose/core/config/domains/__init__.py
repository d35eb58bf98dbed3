"""Domain configuration accessors."""
from .features import FeaturesConfig
from .logging import LoggingConfig
from .migration import MigrationConfig

__all__ = ["FeaturesConfig", "LoggingConfig", "MigrationConfig"]
