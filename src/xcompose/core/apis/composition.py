"""Composition and CompositionRevision API types.

A composition is either legacy-shaped (``mode`` unset or ``Resources``; the
built-in engine evaluates ``patchSets``, ``environment.patches`` and
``resources``) or pipeline-shaped (``mode: Pipeline``; an ordered list of
function steps). The two shapes are mutually exclusive.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..exceptions import InvalidValidationModeError
from .connection import ConnectionDetail
from .meta import ObjectMeta, TypeMeta, omit_none
from .patches import EnvironmentPatch, Patch

COMPOSITION_API_VERSION = "apiextensions.crossplane.io/v1"
COMPOSITION_KIND = "Composition"
COMPOSITION_REVISION_KIND = "CompositionRevision"

COMPOSITION_VALIDATION_MODE_ANNOTATION = "crossplane.io/composition-schema-aware-validation-mode"
ERR_FMT_INVALID_VALIDATION_MODE = "invalid schema-aware composition validation mode: {}"


class CompositionMode(str, Enum):
    RESOURCES = "Resources"
    PIPELINE = "Pipeline"


class CompositionValidationMode(str, Enum):
    LOOSE = "loose"
    STRICT = "strict"


DEFAULT_VALIDATION_MODE = CompositionValidationMode.LOOSE


def _opaque(value: Any) -> Any:
    return copy.deepcopy(value)


def _extra(data: Dict[str, Any], known: tuple) -> Dict[str, Any]:
    return {k: copy.deepcopy(v) for k, v in data.items() if k not in known}


@dataclass
class TypeReference:
    api_version: str = ""
    kind: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TypeReference":
        return cls(api_version=data.get("apiVersion", "") or "", kind=data.get("kind", "") or "")

    def to_dict(self) -> Dict[str, Any]:
        return {"apiVersion": self.api_version, "kind": self.kind}


@dataclass
class StoreConfigReference:
    name: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreConfigReference":
        return cls(name=data.get("name", "") or "")

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name}


@dataclass
class PatchSet:
    name: str = ""
    patches: List[Patch] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PatchSet":
        return cls(
            name=data.get("name", "") or "",
            patches=[Patch.from_dict(p) for p in data.get("patches") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "patches": [p.to_dict() for p in self.patches]}


@dataclass
class ComposedTemplate:
    """Template for one composed resource.

    Attributes:
        name: Template name; None or empty marks an "anonymous" template.
        base: Base manifest of the composed resource (opaque).
        patches: Patches applied to the base.
        connection_details: Connection details extracted from the resource.
        readiness_checks: Readiness checks (opaque).
        extra: Keys not modelled above.
    """

    name: Optional[str] = None
    base: Dict[str, Any] = field(default_factory=dict)
    patches: List[Patch] = field(default_factory=list)
    connection_details: List[ConnectionDetail] = field(default_factory=list)
    readiness_checks: Optional[List[Dict[str, Any]]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN = ("name", "base", "patches", "connectionDetails", "readinessChecks")

    @property
    def is_anonymous(self) -> bool:
        return not self.name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComposedTemplate":
        return cls(
            name=data.get("name"),
            base=_opaque(data.get("base") or {}),
            patches=[Patch.from_dict(p) for p in data.get("patches") or []],
            connection_details=[ConnectionDetail.from_dict(c) for c in data.get("connectionDetails") or []],
            readiness_checks=_opaque(data.get("readinessChecks")),
            extra=_extra(data, cls._KNOWN),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = omit_none({
            "name": self.name,
            "base": _opaque(self.base),
            "patches": [p.to_dict() for p in self.patches] or None,
            "connectionDetails": [c.to_dict() for c in self.connection_details] or None,
            "readinessChecks": _opaque(self.readiness_checks),
        })
        out.update(_opaque(self.extra))
        return out


@dataclass
class EnvironmentConfiguration:
    environment_configs: Optional[List[Dict[str, Any]]] = None
    default_data: Optional[Dict[str, Any]] = None
    patches: List[EnvironmentPatch] = field(default_factory=list)
    policy: Optional[Dict[str, Any]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN = ("environmentConfigs", "defaultData", "patches", "policy")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnvironmentConfiguration":
        return cls(
            environment_configs=_opaque(data.get("environmentConfigs")),
            default_data=_opaque(data.get("defaultData")),
            patches=[EnvironmentPatch.from_dict(p) for p in data.get("patches") or []],
            policy=_opaque(data.get("policy")),
            extra=_extra(data, cls._KNOWN),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = omit_none({
            "environmentConfigs": _opaque(self.environment_configs),
            "defaultData": _opaque(self.default_data),
            "patches": [p.to_dict() for p in self.patches] or None,
            "policy": _opaque(self.policy),
        })
        out.update(_opaque(self.extra))
        return out


@dataclass
class FunctionReference:
    name: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FunctionReference":
        return cls(name=data.get("name", "") or "")

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name}


@dataclass
class PipelineStep:
    step: str = ""
    function_ref: FunctionReference = field(default_factory=FunctionReference)
    input: Optional[Dict[str, Any]] = None
    credentials: Optional[List[Dict[str, Any]]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineStep":
        return cls(
            step=data.get("step", "") or "",
            function_ref=FunctionReference.from_dict(data.get("functionRef") or {}),
            input=_opaque(data.get("input")),
            credentials=_opaque(data.get("credentials")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return omit_none({
            "step": self.step,
            "functionRef": self.function_ref.to_dict(),
            "input": _opaque(self.input),
            "credentials": _opaque(self.credentials),
        })


@dataclass
class CompositionSpec:
    composite_type_ref: TypeReference = field(default_factory=TypeReference)
    mode: Optional[str] = None
    patch_sets: List[PatchSet] = field(default_factory=list)
    environment: Optional[EnvironmentConfiguration] = None
    resources: List[ComposedTemplate] = field(default_factory=list)
    pipeline: List[PipelineStep] = field(default_factory=list)
    write_connection_secrets_to_namespace: Optional[str] = None
    publish_connection_details_with_store_config_ref: Optional[StoreConfigReference] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN = (
        "compositeTypeRef",
        "mode",
        "patchSets",
        "environment",
        "resources",
        "pipeline",
        "writeConnectionSecretsToNamespace",
        "publishConnectionDetailsWithStoreConfigRef",
    )

    @classmethod
    def _kwargs(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        env = data.get("environment")
        store = data.get("publishConnectionDetailsWithStoreConfigRef")
        return {
            "composite_type_ref": TypeReference.from_dict(data.get("compositeTypeRef") or {}),
            "mode": data.get("mode"),
            "patch_sets": [PatchSet.from_dict(p) for p in data.get("patchSets") or []],
            "environment": EnvironmentConfiguration.from_dict(env) if isinstance(env, dict) else None,
            "resources": [ComposedTemplate.from_dict(r) for r in data.get("resources") or []],
            "pipeline": [PipelineStep.from_dict(s) for s in data.get("pipeline") or []],
            "write_connection_secrets_to_namespace": data.get("writeConnectionSecretsToNamespace"),
            "publish_connection_details_with_store_config_ref": (
                StoreConfigReference.from_dict(store) if isinstance(store, dict) else None
            ),
            "extra": _extra(data, cls._KNOWN),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CompositionSpec":
        return cls(**cls._kwargs(data or {}))

    def to_dict(self) -> Dict[str, Any]:
        store = self.publish_connection_details_with_store_config_ref
        mode = self.mode.value if isinstance(self.mode, Enum) else self.mode
        out = omit_none({
            "compositeTypeRef": self.composite_type_ref.to_dict(),
            "mode": mode,
            "patchSets": [p.to_dict() for p in self.patch_sets] or None,
            "environment": self.environment.to_dict() if self.environment is not None else None,
            "resources": [r.to_dict() for r in self.resources] or None,
            "pipeline": [s.to_dict() for s in self.pipeline] or None,
            "writeConnectionSecretsToNamespace": self.write_connection_secrets_to_namespace,
            "publishConnectionDetailsWithStoreConfigRef": store.to_dict() if store is not None else None,
        })
        out.update(_opaque(self.extra))
        return out


@dataclass
class CompositionRevisionSpec(CompositionSpec):
    revision: int = 0

    _KNOWN = CompositionSpec._KNOWN + ("revision",)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CompositionRevisionSpec":
        data = data or {}
        kwargs = cls._kwargs(data)
        kwargs["revision"] = int(data.get("revision", 0) or 0)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["revision"] = self.revision
        return out


def _is_pipeline(mode: Optional[str]) -> bool:
    return mode is not None and mode == CompositionMode.PIPELINE


def get_validation_mode(obj: "Composition") -> CompositionValidationMode:
    """Return the schema-aware validation mode requested by ``obj``.

    Raises:
        InvalidValidationModeError: The annotation is present but is not one
            of the recognized values. Matching is exact and case-sensitive.
    """
    annotations = obj.metadata.annotations or {}
    if COMPOSITION_VALIDATION_MODE_ANNOTATION not in annotations:
        return DEFAULT_VALIDATION_MODE

    raw = annotations[COMPOSITION_VALIDATION_MODE_ANNOTATION]
    for mode in CompositionValidationMode:
        if raw == mode.value:
            return mode
    raise InvalidValidationModeError(
        ERR_FMT_INVALID_VALIDATION_MODE.format(raw),
        context={"value": raw, "annotation": COMPOSITION_VALIDATION_MODE_ANNOTATION},
    )


@dataclass
class Composition:
    type_meta: TypeMeta = field(
        default_factory=lambda: TypeMeta(api_version=COMPOSITION_API_VERSION, kind=COMPOSITION_KIND)
    )
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: CompositionSpec = field(default_factory=CompositionSpec)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Composition":
        return cls(
            type_meta=TypeMeta.from_dict(data),
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=CompositionSpec.from_dict(data.get("spec")),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = self.type_meta.to_dict()
        out["metadata"] = self.metadata.to_dict()
        out["spec"] = self.spec.to_dict()
        return out

    def is_pipeline_mode(self) -> bool:
        return _is_pipeline(self.spec.mode)

    def get_validation_mode(self) -> CompositionValidationMode:
        return get_validation_mode(self)


@dataclass
class CompositionRevision:
    type_meta: TypeMeta = field(
        default_factory=lambda: TypeMeta(api_version=COMPOSITION_API_VERSION, kind=COMPOSITION_REVISION_KIND)
    )
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: CompositionRevisionSpec = field(default_factory=CompositionRevisionSpec)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompositionRevision":
        return cls(
            type_meta=TypeMeta.from_dict(data),
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=CompositionRevisionSpec.from_dict(data.get("spec")),
        )

    @classmethod
    def from_composition(cls, comp: Composition, revision: int = 1) -> "CompositionRevision":
        """Snapshot ``comp`` as a revision; nothing is shared with ``comp``."""
        spec_data = comp.spec.to_dict()
        spec_data["revision"] = revision
        meta = copy.deepcopy(comp.metadata)
        if meta.name:
            meta.name = f"{meta.name}-{revision}"
        return cls(metadata=meta, spec=CompositionRevisionSpec.from_dict(spec_data))

    def to_dict(self) -> Dict[str, Any]:
        out = self.type_meta.to_dict()
        out["metadata"] = self.metadata.to_dict()
        out["spec"] = self.spec.to_dict()
        return out

    def is_pipeline_mode(self) -> bool:
        return _is_pipeline(self.spec.mode)

    def anonymous_templates(self) -> List[int]:
        """Return the indexes of resource templates without a name."""
        return [i for i, t in enumerate(self.spec.resources) if t.is_anonymous]


__all__ = [
    "COMPOSITION_API_VERSION",
    "COMPOSITION_KIND",
    "COMPOSITION_REVISION_KIND",
    "COMPOSITION_VALIDATION_MODE_ANNOTATION",
    "ERR_FMT_INVALID_VALIDATION_MODE",
    "DEFAULT_VALIDATION_MODE",
    "CompositionMode",
    "CompositionValidationMode",
    "TypeReference",
    "StoreConfigReference",
    "PatchSet",
    "ComposedTemplate",
    "EnvironmentConfiguration",
    "FunctionReference",
    "PipelineStep",
    "CompositionSpec",
    "CompositionRevisionSpec",
    "Composition",
    "CompositionRevision",
    "get_validation_mode",
]
