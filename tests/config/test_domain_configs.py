from __future__ import annotations

from pathlib import Path

import pytest

from xcompose.core.config import FeaturesConfig, LoggingConfig, MigrationConfig
from xcompose.core.features import Flag


def test_features_config_builds_flags(isolated_project_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XCOMPOSE_FEATURES__ENABLED", '["EnableAlphaCompositionFunctions"]')

    flags = FeaturesConfig(repo_root=isolated_project_env).flags()

    assert flags.enabled(Flag.ENABLE_ALPHA_COMPOSITION_FUNCTIONS)
    assert not flags.enabled(Flag.ENABLE_PROVIDER_IDENTITY)


def test_migration_config_defaults(isolated_project_env: Path) -> None:
    cfg = MigrationConfig(repo_root=isolated_project_env)
    assert cfg.function_name == "function-patch-and-transform"
    assert cfg.step_name == "patch-and-transform"


def test_logging_config_resolves_relative_file(isolated_project_env: Path) -> None:
    (isolated_project_env / ".xcompose" / "config" / "logging.yaml").write_text(
        "logging:\n  level: debug\n  file: logs/xcompose.log\n", encoding="utf-8"
    )

    cfg = LoggingConfig(repo_root=isolated_project_env)

    assert cfg.level == "DEBUG"
    assert cfg.file == isolated_project_env / "logs" / "xcompose.log"


def test_logging_config_without_file(isolated_project_env: Path) -> None:
    assert LoggingConfig(repo_root=isolated_project_env).file is None
