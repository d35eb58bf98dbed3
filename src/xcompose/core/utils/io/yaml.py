"""YAML I/O for configuration files and resource manifests."""
from __future__ import annotations

from pathlib import Path
from typing import Any, List

import yaml

from .core import atomic_write


class _Dumper(yaml.SafeDumper):
    """SafeDumper that writes multiline strings as literal blocks."""


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_Dumper.add_representer(str, _str_representer)


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read a single-document YAML file.

    Returns ``default`` if the file is missing or invalid, unless
    ``raise_on_error`` is True.
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if data is not None else default
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default


def read_yaml_documents(path: Path) -> List[Any]:
    """Read every document from a (possibly multi-document) YAML file.

    Empty documents (a bare ``---`` or a trailing separator) carry no
    content and are skipped. Every other document is returned as parsed,
    whatever its type.

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If the file is not valid YAML
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return [doc for doc in yaml.safe_load_all(f) if doc is not None]


def dump_yaml_string(data: Any, sort_keys: bool = False) -> str:
    """Dump data to a YAML string, preserving key order by default."""
    return yaml.dump(
        data,
        Dumper=_Dumper,
        default_flow_style=False,
        sort_keys=sort_keys,
        allow_unicode=True,
    )


def write_yaml(path: Path, data: Any, sort_keys: bool = False) -> None:
    """Atomically write YAML data to ``path``."""

    def _writer(f) -> None:
        f.write(dump_yaml_string(data, sort_keys=sort_keys))

    atomic_write(Path(path), _writer)


def iter_yaml_files(dir_path: Path) -> List[Path]:
    """Return YAML files in ``dir_path`` in deterministic order.

    When both ``<name>.yaml`` and ``<name>.yml`` exist only ``.yaml`` is
    returned.
    """
    d = Path(dir_path)
    if not d.exists():
        return []
    yml_files = {p.stem: p for p in d.glob("*.yml")}
    yaml_files = {p.stem: p for p in d.glob("*.yaml")}

    out: List[Path] = []
    for stem in sorted(set(yml_files) | set(yaml_files)):
        preferred = yaml_files.get(stem) or yml_files.get(stem)
        if preferred is not None:
            out.append(preferred)
    return out


__all__ = [
    "read_yaml",
    "read_yaml_documents",
    "dump_yaml_string",
    "write_yaml",
    "iter_yaml_files",
]
