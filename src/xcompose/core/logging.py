"""Process-wide stdlib logging setup for the CLI.

Library modules only create module loggers; handlers are installed here,
once, by the entry point.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from xcompose.core.utils.io import ensure_directory

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONFIGURED_LOG_PATH: Optional[str] = None
_FILE_HANDLER: Optional[logging.Handler] = None
_NULL_HANDLER: Optional[logging.Handler] = None


def level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, log_path: Path, level: str = "INFO") -> None:
    """Send stdlib logging to ``log_path`` instead of stdout/stderr.

    Idempotent per process: calling again with the same file is a no-op and
    calling with another file swaps the handler.
    """
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER

    resolved = str(Path(log_path).resolve())
    if _CONFIGURED_LOG_PATH == resolved and _FILE_HANDLER is not None:
        return

    ensure_directory(Path(resolved).parent)

    root = logging.getLogger()
    root.setLevel(level_from_name(level))

    # FileHandler is a StreamHandler too; only drop the console ones.
    for h in list(root.handlers):
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) in (sys.stdout, sys.stderr):
            root.removeHandler(h)
            h.close()

    if _FILE_HANDLER is not None:
        root.removeHandler(_FILE_HANDLER)
        _FILE_HANDLER.close()
        _FILE_HANDLER = None

    fh = logging.FileHandler(resolved, encoding="utf-8")
    fh.setLevel(level_from_name(level))
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(fh)

    _FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def suppress_lastresort_in_json_mode() -> None:
    """Keep stdlib's lastResort handler from writing warnings next to JSON output."""
    global _NULL_HANDLER

    root = logging.getLogger()
    if root.handlers or _NULL_HANDLER is not None:
        return
    _NULL_HANDLER = logging.NullHandler()
    root.addHandler(_NULL_HANDLER)


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove every root handler and forget configured state."""
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER, _NULL_HANDLER
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    _CONFIGURED_LOG_PATH = None
    _FILE_HANDLER = None
    _NULL_HANDLER = None


__all__ = [
    "LOG_FORMAT",
    "configure_stdlib_logging",
    "level_from_name",
    "reset_stdlib_logging_for_tests",
    "suppress_lastresort_in_json_mode",
]
