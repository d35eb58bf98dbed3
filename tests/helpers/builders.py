"""Builders for compositions, composites and composers used across tests."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from xcompose.core.apis import Composition, CompositionRevision
from xcompose.core.composite import Composer, CompositionRequest, CompositionResult
from xcompose.core.context import ReconcileContext
from xcompose.core.resource import (
    Composed,
    Composite,
    set_composition_resource_name,
)

API_VERSION = "apiextensions.crossplane.io/v1"


def composition_dict(
    name: str = "example",
    *,
    resources: Optional[List[Dict[str, Any]]] = None,
    patch_sets: Optional[List[Dict[str, Any]]] = None,
    environment: Optional[Dict[str, Any]] = None,
    mode: Optional[str] = None,
    annotations: Optional[Dict[str, str]] = None,
    **spec_extra: Any,
) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {"name": name}
    if annotations:
        metadata["annotations"] = dict(annotations)
    spec: Dict[str, Any] = {
        "compositeTypeRef": {"apiVersion": "example.org/v1", "kind": "XDatabase"},
    }
    if mode is not None:
        spec["mode"] = mode
    if patch_sets is not None:
        spec["patchSets"] = patch_sets
    if environment is not None:
        spec["environment"] = environment
    if resources is not None:
        spec["resources"] = resources
    spec.update(spec_extra)
    return {"apiVersion": API_VERSION, "kind": "Composition", "metadata": metadata, "spec": spec}


def composition(**kwargs: Any) -> Composition:
    return Composition.from_dict(composition_dict(**kwargs))


def template(name: Optional[str] = None, **fields: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {"base": {"apiVersion": "nop.example.org/v1", "kind": "NopResource"}}
    if name is not None:
        out["name"] = name
    out.update(fields)
    return out


def revision(*template_names: Optional[str]) -> CompositionRevision:
    comp = composition(resources=[template(n) for n in template_names])
    return CompositionRevision.from_composition(comp)


def request(*template_names: Optional[str]) -> CompositionRequest:
    return CompositionRequest(revision=revision(*template_names))


def composed(name: str, resource_name: Optional[str] = None) -> Composed:
    obj = Composed({"apiVersion": "nop.example.org/v1", "kind": "NopResource", "metadata": {"name": name}})
    if resource_name is not None:
        set_composition_resource_name(obj, resource_name)
    return obj


def composite(*refs: Composed, name: str = "cool-xr") -> Composite:
    xr = Composite({"apiVersion": "example.org/v1", "kind": "XDatabase", "metadata": {"name": name}})
    xr.set_resource_references([r.reference() for r in refs])
    return xr


class RecordingComposer(Composer):
    """Composer that records calls and returns (or raises) a canned outcome."""

    def __init__(self, result: Optional[CompositionResult] = None, error: Optional[Exception] = None) -> None:
        self.result = result if result is not None else CompositionResult()
        self.error = error
        self.calls: List[tuple] = []

    def compose(self, ctx: ReconcileContext, xr: Composite, req: CompositionRequest) -> CompositionResult:
        self.calls.append((ctx, xr, req))
        if self.error is not None:
            raise self.error
        return self.result


class FailingReader:
    """ResourceReader whose ``get`` always raises ``error``."""

    def __init__(self, error: Exception) -> None:
        self.error = error
        self.calls = 0

    def get(self, ctx, ref):
        self.calls += 1
        raise self.error
