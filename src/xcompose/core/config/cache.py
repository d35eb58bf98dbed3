"""Centralized configuration caching.

One merged config dict per project root. The cache key fingerprints the
XCOMPOSE_* environment and the project config files so that changes to
either are picked up without an explicit clear.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

_config_cache: Dict[str, Dict[str, Any]] = {}
_cache_clearers: Dict[str, Callable[[], None]] = {}


def _normalize_repo_root(repo_root: Optional[Path]) -> Path:
    if repo_root is None:
        return Path.cwd().resolve()
    return Path(repo_root).expanduser().resolve()


def _cache_key(repo_root: Path) -> str:
    from xcompose.core.utils.io import iter_yaml_files

    from .manager import ENV_PREFIX, get_project_config_dir

    env_items = sorted(
        (k, os.environ.get(k, ""))
        for k in os.environ.keys()
        if k.startswith(ENV_PREFIX)
    )
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    files: List[Tuple[str, int, int]] = []
    for p in iter_yaml_files(get_project_config_dir(repo_root)):
        st = p.stat()
        files.append((p.name, int(st.st_mtime_ns), int(st.st_size)))
    cfg_fp = hashlib.sha256(repr(files).encode("utf-8")).hexdigest()[:12]

    return f"{repo_root}:env={env_fp}:cfg={cfg_fp}"


def get_cached_config(repo_root: Optional[Path] = None) -> Dict[str, Any]:
    """Get the merged (unvalidated) configuration for ``repo_root``.

    Returns the same dict instance on cache hits.
    """
    from .manager import ConfigManager

    normalized_root = _normalize_repo_root(repo_root)
    key = _cache_key(normalized_root)
    if key not in _config_cache:
        manager = ConfigManager(repo_root=normalized_root)
        _config_cache[key] = manager._load_config_uncached(validate=False)
    return _config_cache[key]


def clear_all_caches() -> None:
    """Clear the config cache and every registered derived cache."""
    _config_cache.clear()
    for clearer in list(_cache_clearers.values()):
        clearer()


def register_cache_clearer(name: str, clearer: Callable[[], None]) -> None:
    _cache_clearers[name] = clearer


def is_cached(repo_root: Optional[Path] = None) -> bool:
    return _cache_key(_normalize_repo_root(repo_root)) in _config_cache


__all__ = [
    "get_cached_config",
    "clear_all_caches",
    "register_cache_clearer",
    "is_cached",
]
