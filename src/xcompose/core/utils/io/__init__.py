"""I/O utilities: atomic writes and YAML documents."""
from __future__ import annotations

from .core import atomic_write, ensure_directory, ensure_parent_dir, write_text
from .yaml import (
    dump_yaml_string,
    iter_yaml_files,
    read_yaml,
    read_yaml_documents,
    write_yaml,
)

__all__ = [
    "atomic_write",
    "ensure_directory",
    "ensure_parent_dir",
    "write_text",
    "dump_yaml_string",
    "iter_yaml_files",
    "read_yaml",
    "read_yaml_documents",
    "write_yaml",
]
