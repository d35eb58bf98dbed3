"""Unstructured wrappers for composite and composed resources.

The engine only reads a handful of fields from these objects, so they stay
as plain mappings rather than typed API classes.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from .apis.meta import ObjectReference, references_from_list

# Records which named template of a composition produced a composed resource.
ANNOTATION_KEY_COMPOSITION_RESOURCE_NAME = "crossplane.io/composition-resource-name"


class Unstructured:
    """Thin accessor over a Kubernetes-style object mapping."""

    def __init__(self, obj: Optional[Dict[str, Any]] = None) -> None:
        self.obj: Dict[str, Any] = obj if obj is not None else {}

    @property
    def api_version(self) -> str:
        return str(self.obj.get("apiVersion", "") or "")

    @property
    def kind(self) -> str:
        return str(self.obj.get("kind", "") or "")

    @property
    def metadata(self) -> Dict[str, Any]:
        return self.obj.get("metadata") or {}

    @property
    def name(self) -> str:
        return str(self.metadata.get("name", "") or "")

    @property
    def namespace(self) -> str:
        return str(self.metadata.get("namespace", "") or "")

    def get_annotations(self) -> Dict[str, str]:
        return dict(self.metadata.get("annotations") or {})

    def set_annotations(self, annotations: Dict[str, str]) -> None:
        self.obj.setdefault("metadata", {})["annotations"] = dict(annotations)

    def reference(self) -> ObjectReference:
        return ObjectReference(
            api_version=self.api_version,
            kind=self.kind,
            name=self.name,
            namespace=self.namespace,
        )

    def deep_copy(self) -> "Unstructured":
        return type(self)(copy.deepcopy(self.obj))

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.obj)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind}/{self.name})"


class Composite(Unstructured):
    """A composite resource (XR)."""

    def get_resource_references(self) -> List[ObjectReference]:
        spec = self.obj.get("spec") or {}
        return references_from_list(spec.get("resourceRefs"))

    def set_resource_references(self, refs: List[ObjectReference]) -> None:
        self.obj.setdefault("spec", {})["resourceRefs"] = [r.to_dict() for r in refs]


class Composed(Unstructured):
    """A resource created from one of a composition's templates."""

    @classmethod
    def from_reference(cls, ref: ObjectReference) -> "Composed":
        metadata: Dict[str, Any] = {"name": ref.name}
        if ref.namespace:
            metadata["namespace"] = ref.namespace
        return cls({"apiVersion": ref.api_version, "kind": ref.kind, "metadata": metadata})


def get_composition_resource_name(obj: Unstructured) -> str:
    """Return the template name recorded on ``obj``, or ``""`` if absent."""
    return obj.get_annotations().get(ANNOTATION_KEY_COMPOSITION_RESOURCE_NAME, "")


def set_composition_resource_name(obj: Unstructured, name: str) -> None:
    annotations = obj.get_annotations()
    annotations[ANNOTATION_KEY_COMPOSITION_RESOURCE_NAME] = name
    obj.set_annotations(annotations)


__all__ = [
    "ANNOTATION_KEY_COMPOSITION_RESOURCE_NAME",
    "Unstructured",
    "Composite",
    "Composed",
    "get_composition_resource_name",
    "set_composition_resource_name",
]
