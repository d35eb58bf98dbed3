from __future__ import annotations

import pytest

from xcompose.core.features import Flag, Flags, parse_flag


def test_parse_known_flag() -> None:
    assert parse_flag("EnableAlphaCompositionFunctions") is Flag.ENABLE_ALPHA_COMPOSITION_FUNCTIONS


def test_parse_unknown_flag() -> None:
    with pytest.raises(ValueError, match="unknown feature flag: EnableNothing"):
        parse_flag("EnableNothing")


def test_flags_enable_and_query() -> None:
    flags = Flags()
    assert not flags.enabled(Flag.ENABLE_PROVIDER_IDENTITY)

    flags.enable(Flag.ENABLE_PROVIDER_IDENTITY)
    flags.enable(Flag.ENABLE_ALPHA_ENVIRONMENT_CONFIGS)

    assert flags.enabled(Flag.ENABLE_PROVIDER_IDENTITY)
    assert flags.names() == ["EnableAlphaEnvironmentConfigs", "EnableProviderIdentity"]
