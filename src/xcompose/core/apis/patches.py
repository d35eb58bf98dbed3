"""Legacy patch types evaluated by the built-in patch-and-transform engine."""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .meta import omit_none
from .transforms import Transform


class PatchType(str, Enum):
    FROM_COMPOSITE_FIELD_PATH = "FromCompositeFieldPath"
    FROM_ENVIRONMENT_FIELD_PATH = "FromEnvironmentFieldPath"
    PATCH_SET = "PatchSet"
    TO_COMPOSITE_FIELD_PATH = "ToCompositeFieldPath"
    TO_ENVIRONMENT_FIELD_PATH = "ToEnvironmentFieldPath"
    COMBINE_FROM_ENVIRONMENT = "CombineFromEnvironment"
    COMBINE_TO_ENVIRONMENT = "CombineToEnvironment"
    COMBINE_FROM_COMPOSITE = "CombineFromComposite"
    COMBINE_TO_COMPOSITE = "CombineToComposite"


class FromFieldPathPolicy(str, Enum):
    OPTIONAL = "Optional"
    REQUIRED = "Required"


@dataclass
class MergeOptions:
    """Legacy merge behaviour; each flag is tri-state (None, False, True)."""

    keep_map_values: Optional[bool] = None
    append_slice: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MergeOptions":
        return cls(keep_map_values=data.get("keepMapValues"), append_slice=data.get("appendSlice"))

    def to_dict(self) -> Dict[str, Any]:
        return omit_none({"keepMapValues": self.keep_map_values, "appendSlice": self.append_slice})


@dataclass
class PatchPolicy:
    from_field_path: Optional[str] = None
    merge_options: Optional[MergeOptions] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PatchPolicy":
        mo = data.get("mergeOptions")
        return cls(
            from_field_path=data.get("fromFieldPath"),
            merge_options=MergeOptions.from_dict(mo) if isinstance(mo, dict) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return omit_none({
            "fromFieldPath": self.from_field_path,
            "mergeOptions": self.merge_options.to_dict() if self.merge_options is not None else None,
        })


@dataclass
class EnvironmentPatch:
    """Patch between the composite resource and the in-memory environment.

    ``combine`` is kept opaque; the engine never rewrites it.
    """

    type: str = ""
    from_field_path: Optional[str] = None
    combine: Optional[Dict[str, Any]] = None
    to_field_path: Optional[str] = None
    transforms: List[Transform] = field(default_factory=list)
    policy: Optional[PatchPolicy] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN = ("type", "fromFieldPath", "combine", "toFieldPath", "transforms", "policy")

    @classmethod
    def _kwargs(cls, data: Dict[str, Any], known: tuple) -> Dict[str, Any]:
        policy = data.get("policy")
        return {
            "type": data.get("type", "") or "",
            "from_field_path": data.get("fromFieldPath"),
            "combine": copy.deepcopy(data.get("combine")),
            "to_field_path": data.get("toFieldPath"),
            "transforms": [Transform.from_dict(t) for t in data.get("transforms") or []],
            "policy": PatchPolicy.from_dict(policy) if isinstance(policy, dict) else None,
            "extra": {k: copy.deepcopy(v) for k, v in data.items() if k not in known},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnvironmentPatch":
        return cls(**cls._kwargs(data, cls._KNOWN))

    def _base_dict(self) -> Dict[str, Any]:
        return omit_none({
            "type": (self.type.value if isinstance(self.type, Enum) else self.type) or None,
            "fromFieldPath": self.from_field_path,
            "combine": copy.deepcopy(self.combine),
            "toFieldPath": self.to_field_path,
            "transforms": [t.to_dict() for t in self.transforms] or None,
            "policy": self.policy.to_dict() if self.policy is not None else None,
        })

    def to_dict(self) -> Dict[str, Any]:
        out = self._base_dict()
        out.update(copy.deepcopy(self.extra))
        return out


@dataclass
class Patch(EnvironmentPatch):
    """Patch applied to a composed resource template or a patch set."""

    patch_set_name: Optional[str] = None

    _KNOWN = EnvironmentPatch._KNOWN + ("patchSetName",)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Patch":
        kwargs = cls._kwargs(data, cls._KNOWN)
        kwargs["patch_set_name"] = data.get("patchSetName")
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        out = self._base_dict()
        if self.patch_set_name is not None:
            out["patchSetName"] = self.patch_set_name
        out.update(copy.deepcopy(self.extra))
        return out


__all__ = [
    "PatchType",
    "FromFieldPathPolicy",
    "MergeOptions",
    "PatchPolicy",
    "EnvironmentPatch",
    "Patch",
]
