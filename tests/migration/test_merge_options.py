from __future__ import annotations

from typing import Optional

import pytest

from xcompose.core.apis import MergeOptions, PatchPolicy
from xcompose.core.migration import ToFieldPathPolicy, migrate_merge_options, migrate_patch_policy


@pytest.mark.parametrize(
    "append_slice, keep_map_values, expected",
    [
        (None, None, ToFieldPathPolicy.FORCE_MERGE_OBJECTS),
        (False, None, ToFieldPathPolicy.FORCE_MERGE_OBJECTS),
        (None, False, ToFieldPathPolicy.FORCE_MERGE_OBJECTS),
        (False, False, ToFieldPathPolicy.FORCE_MERGE_OBJECTS),
        (True, None, ToFieldPathPolicy.FORCE_MERGE_OBJECTS_APPEND_ARRAYS),
        (True, False, ToFieldPathPolicy.FORCE_MERGE_OBJECTS_APPEND_ARRAYS),
        (None, True, ToFieldPathPolicy.MERGE_OBJECTS),
        (False, True, ToFieldPathPolicy.MERGE_OBJECTS),
        (True, True, ToFieldPathPolicy.MERGE_OBJECTS_APPEND_ARRAYS),
    ],
)
def test_merge_options_truth_table(
    append_slice: Optional[bool],
    keep_map_values: Optional[bool],
    expected: ToFieldPathPolicy,
) -> None:
    mo = MergeOptions(keep_map_values=keep_map_values, append_slice=append_slice)
    assert migrate_merge_options(mo) is expected


def test_absent_merge_options_means_replace() -> None:
    assert migrate_merge_options(None) is None


def test_empty_merge_options_differs_from_absent() -> None:
    assert migrate_merge_options(MergeOptions()) is ToFieldPathPolicy.FORCE_MERGE_OBJECTS
    assert migrate_merge_options(None) is None


def test_policy_without_anything_to_migrate_is_dropped() -> None:
    assert migrate_patch_policy(PatchPolicy()) is None


def test_policy_keeps_from_field_path() -> None:
    out = migrate_patch_policy(PatchPolicy(from_field_path="Required"))
    assert out is not None
    assert out.from_field_path == "Required"
    assert out.to_field_path is None
    assert out.to_dict() == {"fromFieldPath": "Required"}


def test_policy_with_merge_options() -> None:
    out = migrate_patch_policy(
        PatchPolicy(from_field_path="Optional", merge_options=MergeOptions(keep_map_values=True))
    )
    assert out is not None
    assert out.to_dict() == {"fromFieldPath": "Optional", "toFieldPath": "MergeObjects"}
