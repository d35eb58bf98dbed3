"""Transform types applied by patches.

A ``Transform`` is a tagged union: ``type`` names the active variant and
exactly one of the variant fields should be populated. The legacy engine
allowed ``type`` (and the Math/String sub-types) to be omitted and inferred
them at runtime, so every discriminant enum has an ``UNSET`` member for the
"not declared / not inferable" state.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .meta import omit_none


class TransformType(str, Enum):
    UNSET = ""
    MAP = "map"
    MATCH = "match"
    MATH = "math"
    STRING = "string"
    CONVERT = "convert"


class MathTransformType(str, Enum):
    UNSET = ""
    MULTIPLY = "Multiply"
    CLAMP_MIN = "ClampMin"
    CLAMP_MAX = "ClampMax"


class StringTransformType(str, Enum):
    UNSET = ""
    FORMAT = "Format"
    CONVERT = "Convert"
    TRIM_PREFIX = "TrimPrefix"
    TRIM_SUFFIX = "TrimSuffix"
    REGEXP = "Regexp"
    JOIN = "Join"
    REPLACE = "Replace"


class StringConversionType(str, Enum):
    TO_UPPER = "ToUpper"
    TO_LOWER = "ToLower"
    TO_BASE64 = "ToBase64"
    FROM_BASE64 = "FromBase64"
    TO_JSON = "ToJson"
    TO_SHA1 = "ToSha1"
    TO_SHA256 = "ToSha256"
    TO_SHA512 = "ToSha512"
    TO_ADLER32 = "ToAdler32"


def _enum_value(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value or "")


@dataclass
class MathTransform:
    type: str = ""
    multiply: Optional[int] = None
    clamp_min: Optional[int] = None
    clamp_max: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MathTransform":
        return cls(
            type=data.get("type", "") or "",
            multiply=data.get("multiply"),
            clamp_min=data.get("clampMin"),
            clamp_max=data.get("clampMax"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return omit_none({
            "type": _enum_value(self.type) or None,
            "multiply": self.multiply,
            "clampMin": self.clamp_min,
            "clampMax": self.clamp_max,
        })


@dataclass
class StringTransform:
    """String transform; ``regexp``, ``join`` and ``replace`` stay opaque."""

    type: str = ""
    fmt: Optional[str] = None
    convert: Optional[str] = None
    trim: Optional[str] = None
    regexp: Optional[Dict[str, Any]] = None
    join: Optional[Dict[str, Any]] = None
    replace: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StringTransform":
        return cls(
            type=data.get("type", "") or "",
            fmt=data.get("fmt"),
            convert=data.get("convert"),
            trim=data.get("trim"),
            regexp=copy.deepcopy(data.get("regexp")),
            join=copy.deepcopy(data.get("join")),
            replace=copy.deepcopy(data.get("replace")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return omit_none({
            "type": _enum_value(self.type) or None,
            "fmt": self.fmt,
            "convert": _enum_value(self.convert) if self.convert is not None else None,
            "trim": self.trim,
            "regexp": copy.deepcopy(self.regexp),
            "join": copy.deepcopy(self.join),
            "replace": copy.deepcopy(self.replace),
        })


@dataclass
class Transform:
    type: str = ""
    math: Optional[MathTransform] = None
    string: Optional[StringTransform] = None
    map: Optional[Dict[str, Any]] = None
    match: Optional[Dict[str, Any]] = None
    convert: Optional[Dict[str, Any]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN = ("type", "math", "string", "map", "match", "convert")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transform":
        math = data.get("math")
        string = data.get("string")
        return cls(
            type=data.get("type", "") or "",
            math=MathTransform.from_dict(math) if isinstance(math, dict) else None,
            string=StringTransform.from_dict(string) if isinstance(string, dict) else None,
            map=copy.deepcopy(data.get("map")),
            match=copy.deepcopy(data.get("match")),
            convert=copy.deepcopy(data.get("convert")),
            extra={k: copy.deepcopy(v) for k, v in data.items() if k not in cls._KNOWN},
        )

    def to_dict(self) -> Dict[str, Any]:
        out = omit_none({
            "type": _enum_value(self.type) or None,
            "math": self.math.to_dict() if self.math is not None else None,
            "string": self.string.to_dict() if self.string is not None else None,
            "map": copy.deepcopy(self.map),
            "match": copy.deepcopy(self.match),
            "convert": copy.deepcopy(self.convert),
        })
        out.update(copy.deepcopy(self.extra))
        return out


__all__ = [
    "TransformType",
    "MathTransformType",
    "StringTransformType",
    "StringConversionType",
    "MathTransform",
    "StringTransform",
    "Transform",
]
