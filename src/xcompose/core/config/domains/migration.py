"""Composition migration configuration (``migration`` section)."""
from __future__ import annotations

from functools import cached_property

from xcompose.core.migration.converter import DEFAULT_FUNCTION_REF_NAME, PIPELINE_STEP_NAME

from ..base import BaseDomainConfig


class MigrationConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "migration"

    @cached_property
    def function_name(self) -> str:
        return str(self.section.get("functionName") or DEFAULT_FUNCTION_REF_NAME)

    @cached_property
    def step_name(self) -> str:
        return str(self.section.get("stepName") or PIPELINE_STEP_NAME)


__all__ = ["MigrationConfig"]
