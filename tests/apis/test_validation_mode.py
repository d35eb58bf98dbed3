from __future__ import annotations

import pytest

from xcompose.core.apis import (
    COMPOSITION_VALIDATION_MODE_ANNOTATION,
    CompositionValidationMode,
    get_validation_mode,
)
from xcompose.core.exceptions import InvalidValidationModeError

from helpers.builders import composition


def test_missing_annotation_defaults_to_loose() -> None:
    comp = composition()
    assert get_validation_mode(comp) is CompositionValidationMode.LOOSE


@pytest.mark.parametrize(
    "value, expected",
    [
        ("strict", CompositionValidationMode.STRICT),
        ("loose", CompositionValidationMode.LOOSE),
    ],
)
def test_recognized_values(value: str, expected: CompositionValidationMode) -> None:
    comp = composition(annotations={COMPOSITION_VALIDATION_MODE_ANNOTATION: value})
    assert comp.get_validation_mode() is expected


@pytest.mark.parametrize("value", ["Strict", "LOOSE", "", "invalid", " strict"])
def test_unrecognized_values_are_rejected(value: str) -> None:
    comp = composition(annotations={COMPOSITION_VALIDATION_MODE_ANNOTATION: value})

    with pytest.raises(InvalidValidationModeError) as excinfo:
        get_validation_mode(comp)

    assert str(excinfo.value) == f"invalid schema-aware composition validation mode: {value}"
    assert excinfo.value.context["value"] == value
    assert isinstance(excinfo.value, ValueError)


def test_other_annotations_are_ignored() -> None:
    comp = composition(annotations={"example.org/owner": "team-a"})
    assert get_validation_mode(comp) is CompositionValidationMode.LOOSE
