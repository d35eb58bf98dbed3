"""Input document of the patch-and-transform pipeline function.

The function accepts the legacy patch, template and patch-set shapes with one
difference: merge behaviour is expressed as a ``toFieldPath`` policy rather
than legacy ``mergeOptions``. Each migrated type embeds the legacy value
(with its ``policy`` cleared) and carries the new policy alongside, so the
serialized document holds exactly one policy representation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..apis import composition as v1
from ..apis import patches as v1patches
from ..apis.meta import omit_none

INPUT_API_VERSION = "pt.fn.crossplane.io/v1beta1"
INPUT_KIND = "Resources"


class ToFieldPathPolicy(str, Enum):
    """How a patched value is combined with the value at the target path.

    An absent policy means ``Replace``.
    """

    REPLACE = "Replace"
    MERGE_OBJECTS = "MergeObjects"
    MERGE_OBJECTS_APPEND_ARRAYS = "MergeObjectsAppendArrays"
    FORCE_MERGE_OBJECTS = "ForceMergeObjects"
    FORCE_MERGE_OBJECTS_APPEND_ARRAYS = "ForceMergeObjectsAppendArrays"


@dataclass
class PatchPolicy:
    from_field_path: Optional[str] = None
    to_field_path: Optional[ToFieldPathPolicy] = None

    def to_dict(self) -> Dict[str, Any]:
        return omit_none({
            "fromFieldPath": self.from_field_path,
            "toFieldPath": self.to_field_path.value if self.to_field_path is not None else None,
        })


def _with_policy(base: Dict[str, Any], policy: Optional[PatchPolicy]) -> Dict[str, Any]:
    if policy is not None:
        base["policy"] = policy.to_dict()
    return base


@dataclass
class EnvironmentPatch:
    patch: v1patches.EnvironmentPatch
    policy: Optional[PatchPolicy] = None

    def to_dict(self) -> Dict[str, Any]:
        return _with_policy(self.patch.to_dict(), self.policy)


@dataclass
class Patch:
    patch: v1patches.Patch
    policy: Optional[PatchPolicy] = None

    def to_dict(self) -> Dict[str, Any]:
        return _with_policy(self.patch.to_dict(), self.policy)


@dataclass
class PatchSet:
    name: str = ""
    patches: List[Patch] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "patches": [p.to_dict() for p in self.patches]}


@dataclass
class ComposedTemplate:
    """Migrated template; ``template.patches`` is always empty."""

    template: v1.ComposedTemplate
    patches: List[Patch] = field(default_factory=list)

    @property
    def name(self) -> Optional[str]:
        return self.template.name

    def to_dict(self) -> Dict[str, Any]:
        out = self.template.to_dict()
        out.pop("patches", None)
        if self.patches:
            out["patches"] = [p.to_dict() for p in self.patches]
        return out


@dataclass
class Environment:
    patches: List[EnvironmentPatch] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"patches": [p.to_dict() for p in self.patches]}


@dataclass
class Input:
    environment: Optional[Environment] = None
    patch_sets: List[PatchSet] = field(default_factory=list)
    resources: List[ComposedTemplate] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "apiVersion": INPUT_API_VERSION,
            "kind": INPUT_KIND,
            "environment": self.environment.to_dict() if self.environment is not None else None,
            "patchSets": [p.to_dict() for p in self.patch_sets],
            "resources": [r.to_dict() for r in self.resources],
        }


__all__ = [
    "INPUT_API_VERSION",
    "INPUT_KIND",
    "ToFieldPathPolicy",
    "PatchPolicy",
    "EnvironmentPatch",
    "Patch",
    "PatchSet",
    "ComposedTemplate",
    "Environment",
    "Input",
]
