"""
xcompose CLI package.

Commands are auto-discovered from domain subfolders (composition/,
composite/, features/).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._args import add_json_flag, add_repo_root_flag
from ._output import OutputFormatter, format_json
from ._utils import get_repo_root, load_yaml_document

__all__ = [
    "OutputFormatter",
    "format_json",
    "add_json_flag",
    "add_repo_root_flag",
    "get_repo_root",
    "load_yaml_document",
]
