"""Layered YAML configuration.

Configuration sources (highest to lowest priority):
1. Environment variables: XCOMPOSE_*
2. Project config: <repo_root>/.xcompose/config/*.yaml (alphabetical order)
3. Bundled defaults: xcompose.data/config/*.yaml (alphabetical order)
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import yaml

from xcompose.core.exceptions import ConfigError
from xcompose.core.utils.io import iter_yaml_files, read_yaml
from xcompose.core.utils.merge import deep_merge
from xcompose.data import get_data_path

from .cache import get_cached_config

logger = logging.getLogger(__name__)

ENV_PREFIX = "XCOMPOSE_"
PROJECT_CONFIG_DIRNAME = ".xcompose"
CONFIG_SCHEMA = "config.schema.yaml"

PathPart = Union[str, int, object]


def get_project_config_dir(repo_root: Path) -> Path:
    return Path(repo_root) / PROJECT_CONFIG_DIRNAME / "config"


class ConfigManager:
    """Load, merge, and validate xcompose configuration."""

    ARRAY_APPEND_MARKER = object()

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root is not None else Path.cwd()
        self.core_config_dir = get_data_path("config")
        self.project_config_dir = get_project_config_dir(self.repo_root)

    # ---------------------------------------------------------------- files

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Configuration never silently ignores invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file must contain a mapping: {path}",
                context={"path": str(path)},
            )
        return data

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            logger.debug("Loading config layer %s", path)
            cfg = deep_merge(cfg, self.load_yaml(path))
        return cfg

    # ------------------------------------------------------- env overrides

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str, *, strict: bool) -> List[PathPart]:
        segs = raw.split("__") if "__" in raw else raw.split("_")
        processed: List[PathPart] = []
        for seg in segs:
            if seg == "":
                if strict:
                    raise ConfigError(
                        f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                        context={"key": ENV_PREFIX + raw},
                    )
                return []
            if seg.isdigit():
                processed.append(int(seg))
            elif seg.upper() == "APPEND":
                processed.append(self.ARRAY_APPEND_MARKER)
            else:
                processed.append(seg.lower())
        return processed

    def _iter_env_overrides(self, *, strict: bool) -> Iterator[Tuple[List[PathPart], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                if strict:
                    raise ConfigError(f"Malformed {ENV_PREFIX}* key", context={"key": key})
                continue
            path = self._parse_env_key(raw, strict=strict)
            if not path:
                continue
            yield path, self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[PathPart], value: Any) -> None:
        """Assign ``value`` at ``path``, matching existing keys case-insensitively."""
        cur: Any = root
        for i, part in enumerate(path[:-1]):
            nxt = path[i + 1]
            if isinstance(part, int) or part is self.ARRAY_APPEND_MARKER:
                raise ConfigError("Invalid path: list index/APPEND may only appear at leaf")
            if not isinstance(cur, dict):
                raise ConfigError("Path traverses non-dict container")
            key = {k.lower(): k for k in cur if isinstance(k, str)}.get(str(part), part)
            if key not in cur or cur[key] is None:
                cur[key] = [] if (isinstance(nxt, int) or nxt is self.ARRAY_APPEND_MARKER) else {}
            cur = cur[key]

        leaf = path[-1]
        if leaf is self.ARRAY_APPEND_MARKER:
            if not isinstance(cur, list):
                raise ConfigError("APPEND requires list")
            cur.append(value)
        elif isinstance(leaf, int):
            if not isinstance(cur, list):
                raise ConfigError("Index assignment requires list")
            while len(cur) <= leaf:
                cur.append(None)
            cur[leaf] = value
        else:
            if not isinstance(cur, dict):
                raise ConfigError("Key assignment requires dict")
            key = {k.lower(): k for k in cur if isinstance(k, str)}.get(str(leaf), leaf)
            cur[key] = value

    def apply_env_overrides(self, cfg: Dict[str, Any], *, strict: bool) -> None:
        for path, typed_value in self._iter_env_overrides(strict=strict):
            self._set_nested(cfg, path, typed_value)

    # -------------------------------------------------------------- loading

    def _load_config_uncached(self, validate: bool = True) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.project_config_dir, cfg)
        self.apply_env_overrides(cfg, strict=validate)
        if validate:
            self.validate_schema(cfg)
        return cfg

    def validate_schema(self, config: Dict[str, Any]) -> None:
        from xcompose.core.schemas.validation import validate_payload

        validate_payload(config, CONFIG_SCHEMA)

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load configuration through the per-project cache.

        ``validate=True`` parses env override keys strictly and validates the
        merged result. The returned dict is shared; treat it as immutable.
        """
        cfg = get_cached_config(repo_root=self.repo_root)
        if validate:
            _ = list(self._iter_env_overrides(strict=True))
            self.validate_schema(cfg)
        return cfg

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key.

        Example:
            >>> manager.get('migration.functionName')
            'function-patch-and-transform'
        """
        current: Any = self.load_config(validate=False)
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


__all__ = ["ConfigManager", "ENV_PREFIX", "get_project_config_dir"]
