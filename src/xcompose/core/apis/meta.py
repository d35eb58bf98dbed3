"""Object metadata shared by every API type.

Wire format follows Kubernetes conventions: camelCase keys, optional keys
omitted when unset. Unknown metadata keys are preserved in ``extra`` so a
load/dump round trip does not drop fields this package does not model.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def omit_none(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``data`` without keys whose value is None."""
    return {k: v for k, v in data.items() if v is not None}


def format_timestamp(value: Any) -> Optional[str]:
    """Normalize a creation timestamp to RFC 3339 (``Z`` suffix).

    PyYAML parses unquoted timestamps into ``datetime`` objects, so both
    strings and datetimes are accepted. Fractional seconds are kept, with
    trailing zeros trimmed; strings are returned as given.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        out = value.strftime("%Y-%m-%dT%H:%M:%S")
        if value.microsecond:
            out += f".{value.microsecond:06d}".rstrip("0")
        return out + "Z"
    return str(value)


def now_timestamp() -> str:
    return format_timestamp(datetime.now(timezone.utc).replace(microsecond=0)) or ""


@dataclass
class TypeMeta:
    api_version: str = ""
    kind: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TypeMeta":
        return cls(api_version=data.get("apiVersion", "") or "", kind=data.get("kind", "") or "")

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.api_version:
            out["apiVersion"] = self.api_version
        if self.kind:
            out["kind"] = self.kind
        return out


@dataclass
class ObjectMeta:
    """Subset of Kubernetes ObjectMeta that the engine reads or writes.

    Attributes:
        name: Object name.
        namespace: Object namespace (empty for cluster-scoped objects).
        labels: Label mapping.
        annotations: Annotation mapping.
        creation_timestamp: RFC 3339 timestamp, None when unset.
        extra: Metadata keys not modelled above (uid, ownerReferences, ...).
    """

    name: str = ""
    namespace: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)
    creation_timestamp: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN = ("name", "namespace", "labels", "annotations", "creationTimestamp")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ObjectMeta":
        data = data or {}
        return cls(
            name=data.get("name", "") or "",
            namespace=data.get("namespace", "") or "",
            labels=dict(data.get("labels") or {}),
            annotations=dict(data.get("annotations") or {}),
            creation_timestamp=format_timestamp(data.get("creationTimestamp")),
            extra={k: copy.deepcopy(v) for k, v in data.items() if k not in cls._KNOWN},
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.name:
            out["name"] = self.name
        if self.namespace:
            out["namespace"] = self.namespace
        if self.labels:
            out["labels"] = dict(self.labels)
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        # Kubernetes serializes an unset timestamp as null.
        out["creationTimestamp"] = self.creation_timestamp
        out.update(copy.deepcopy(self.extra))
        return out


@dataclass(frozen=True)
class ObjectReference:
    """Reference from a composite resource to one of its composed resources."""

    api_version: str = ""
    kind: str = ""
    name: str = ""
    namespace: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ObjectReference":
        return cls(
            api_version=data.get("apiVersion", "") or "",
            kind=data.get("kind", "") or "",
            name=data.get("name", "") or "",
            namespace=data.get("namespace", "") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        out = {"apiVersion": self.api_version, "kind": self.kind, "name": self.name}
        if self.namespace:
            out["namespace"] = self.namespace
        return out

    def __str__(self) -> str:
        prefix = f"{self.namespace}/" if self.namespace else ""
        return f"{self.kind}/{prefix}{self.name}"


def references_from_list(items: Optional[List[Dict[str, Any]]]) -> List[ObjectReference]:
    return [ObjectReference.from_dict(i) for i in (items or []) if isinstance(i, dict)]


__all__ = [
    "TypeMeta",
    "ObjectMeta",
    "ObjectReference",
    "omit_none",
    "format_timestamp",
    "now_timestamp",
    "references_from_list",
]
