from __future__ import annotations

import pytest

from xcompose.core.apis import (
    ComposedTemplate,
    ConnectionDetail,
    MathTransform,
    Patch,
    StringTransform,
    Transform,
)
from xcompose.core.migration.converter import (
    set_missing_connection_detail_fields,
    set_missing_patch_fields,
    set_missing_resource_fields,
    set_transform_type_required_fields,
)


@pytest.mark.parametrize("idx", [0, 1, 12])
def test_anonymous_templates_get_positional_names(idx: int) -> None:
    out = set_missing_resource_fields(idx, ComposedTemplate())
    assert out.name == f"resource-{idx}"


def test_named_templates_keep_their_name() -> None:
    assert set_missing_resource_fields(3, ComposedTemplate(name="db")).name == "db"


def test_empty_name_counts_as_missing() -> None:
    assert set_missing_resource_fields(2, ComposedTemplate(name="")).name == "resource-2"


def test_missing_patch_type_defaults_to_from_composite_field_path() -> None:
    out = set_missing_patch_fields(Patch(from_field_path="spec.a", to_field_path="spec.b"))
    assert out.type == "FromCompositeFieldPath"


def test_explicit_patch_type_is_kept() -> None:
    out = set_missing_patch_fields(Patch(type="ToCompositeFieldPath"))
    assert out.type == "ToCompositeFieldPath"


@pytest.mark.parametrize(
    "math, expected",
    [
        (MathTransform(multiply=2), "Multiply"),
        (MathTransform(clamp_min=1), "ClampMin"),
        (MathTransform(clamp_max=9), "ClampMax"),
        (MathTransform(clamp_min=1, multiply=2), "ClampMin"),
        (MathTransform(), ""),
    ],
)
def test_math_transform_inference(math: MathTransform, expected: str) -> None:
    out = set_transform_type_required_fields(Transform(math=math))
    assert out.type == "math"
    assert out.math is not None and out.math.type == expected


@pytest.mark.parametrize(
    "string, expected",
    [
        (StringTransform(fmt="%s-suffix"), "Format"),
        (StringTransform(convert="ToUpper"), "Convert"),
        (StringTransform(regexp={"match": "^(.*)$"}), "Regexp"),
        (StringTransform(trim="prefix-"), ""),
    ],
)
def test_string_transform_inference(string: StringTransform, expected: str) -> None:
    out = set_transform_type_required_fields(Transform(string=string))
    assert out.type == "string"
    assert out.string is not None and out.string.type == expected


def test_explicit_sub_type_is_kept() -> None:
    out = set_transform_type_required_fields(
        Transform(type="math", math=MathTransform(type="ClampMax", clamp_max=3, multiply=2))
    )
    assert out.math is not None and out.math.type == "ClampMax"


def test_string_wins_when_both_variants_are_set() -> None:
    out = set_transform_type_required_fields(
        Transform(math=MathTransform(multiply=2), string=StringTransform(fmt="%d"))
    )
    assert out.type == "string"


def test_uninferable_transform_type_stays_empty() -> None:
    out = set_transform_type_required_fields(Transform(map={"a": "b"}))
    assert out.type == ""
    assert "type" not in out.to_dict()


def test_transform_is_not_mutated() -> None:
    t = Transform(math=MathTransform(multiply=2))
    set_transform_type_required_fields(t)
    assert t.type == "" and t.math is not None and t.math.type == ""


@pytest.mark.parametrize(
    "detail, expected_type, expected_name",
    [
        (ConnectionDetail(value="admin"), "FromValue", None),
        (ConnectionDetail(name="user", value="admin"), "FromValue", "user"),
        (ConnectionDetail(from_field_path="status.endpoint"), "FromFieldPath", None),
        (ConnectionDetail(from_connection_secret_key="password"), "FromConnectionSecretKey", "password"),
        (
            ConnectionDetail(name="pw", from_connection_secret_key="password"),
            "FromConnectionSecretKey",
            "pw",
        ),
        (ConnectionDetail(name="nothing"), None, "nothing"),
    ],
)
def test_connection_detail_fields(detail: ConnectionDetail, expected_type, expected_name) -> None:
    out = set_missing_connection_detail_fields(detail)
    assert out.type == expected_type
    assert out.name == expected_name


def test_connection_detail_explicit_type_is_kept() -> None:
    detail = ConnectionDetail(type="FromFieldPath", from_field_path="status.host", value="x")
    assert set_missing_connection_detail_fields(detail).type == "FromFieldPath"


def test_value_wins_over_other_sources() -> None:
    detail = ConnectionDetail(value="v", from_field_path="f", from_connection_secret_key="k")
    out = set_missing_connection_detail_fields(detail)
    assert out.type == "FromValue"
    assert out.name is None
