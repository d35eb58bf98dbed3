"""Feature flags.

Flags are enabled from configuration (``features.enabled``) at startup. The
engine only consults them to decide how composers are wired; storage of the
flags is the configuration layer's concern.
"""
from __future__ import annotations

import threading
from enum import Enum
from typing import Iterable, List, Set


class Flag(str, Enum):
    # Alpha support for composition environments.
    ENABLE_ALPHA_ENVIRONMENT_CONFIGS = "EnableAlphaEnvironmentConfigs"
    # Alpha support for external secret stores.
    ENABLE_ALPHA_EXTERNAL_SECRET_STORES = "EnableAlphaExternalSecretStores"
    # Function pipelines; wires the fallback composer in front of the
    # legacy patch-and-transform composer.
    ENABLE_ALPHA_COMPOSITION_FUNCTIONS = "EnableAlphaCompositionFunctions"
    # Schema-aware validation of compositions (honours the validation-mode
    # annotation).
    ENABLE_ALPHA_COMPOSITION_WEBHOOK_SCHEMA_VALIDATION = "EnableAlphaCompositionWebhookSchemaValidation"
    # Provider identity; only meaningful on hosted control planes.
    ENABLE_PROVIDER_IDENTITY = "EnableProviderIdentity"


def parse_flag(name: str) -> Flag:
    """Return the flag called ``name``.

    Raises:
        ValueError: ``name`` is not a known flag.
    """
    for flag in Flag:
        if flag.value == name:
            return flag
    known = ", ".join(f.value for f in Flag)
    raise ValueError(f"unknown feature flag: {name} (known: {known})")


class Flags:
    """Thread-safe set of enabled feature flags."""

    def __init__(self, enabled: Iterable[Flag] = ()) -> None:
        self._lock = threading.Lock()
        self._enabled: Set[Flag] = set(enabled)

    def enable(self, flag: Flag) -> None:
        with self._lock:
            self._enabled.add(flag)

    def enabled(self, flag: Flag) -> bool:
        with self._lock:
            return flag in self._enabled

    def names(self) -> List[str]:
        with self._lock:
            return sorted(f.value for f in self._enabled)


__all__ = ["Flag", "Flags", "parse_flag"]
