import os
import sys
from pathlib import Path

import pytest

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'xcompose' and tests/ importable for helpers.
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from helpers.cache_utils import reset_xcompose_caches  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_global_caches(monkeypatch: pytest.MonkeyPatch):
    """Fresh caches and no developer XCOMPOSE_* overrides for every test."""
    for key in list(os.environ):
        if key.startswith("XCOMPOSE_"):
            monkeypatch.delenv(key, raising=False)
    reset_xcompose_caches()
    yield
    reset_xcompose_caches()


@pytest.fixture
def isolated_project_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated project root (cwd) with an empty ``.xcompose/config`` directory."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".xcompose" / "config").mkdir(parents=True)
    return tmp_path
