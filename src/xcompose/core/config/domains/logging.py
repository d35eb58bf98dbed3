"""Logging configuration (``logging`` section)."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Optional

from ..base import BaseDomainConfig


class LoggingConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "logging"

    @cached_property
    def level(self) -> str:
        return str(self.section.get("level") or "INFO").upper()

    @cached_property
    def file(self) -> Optional[Path]:
        """Resolved log file path, or None when file logging is off."""
        raw = self.section.get("file")
        if not raw:
            return None
        path = Path(str(raw)).expanduser()
        if not path.is_absolute():
            path = self.repo_root / path
        return path


__all__ = ["LoggingConfig"]
