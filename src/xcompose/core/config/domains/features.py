"""Feature flag configuration (``features`` section)."""
from __future__ import annotations

from functools import cached_property
from typing import List

from xcompose.core.exceptions import ConfigError
from xcompose.core.features import Flag, Flags, parse_flag

from ..base import BaseDomainConfig


class FeaturesConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "features"

    @cached_property
    def enabled_names(self) -> List[str]:
        return [str(n) for n in (self.section.get("enabled") or [])]

    @cached_property
    def enabled_flags(self) -> List[Flag]:
        out: List[Flag] = []
        for name in self.enabled_names:
            try:
                out.append(parse_flag(name))
            except ValueError as exc:
                raise ConfigError(str(exc), context={"section": "features.enabled"}) from exc
        return out

    def flags(self) -> Flags:
        """Return a fresh ``Flags`` set with the configured flags enabled."""
        return Flags(self.enabled_flags)


__all__ = ["FeaturesConfig"]
