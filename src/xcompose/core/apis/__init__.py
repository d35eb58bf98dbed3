"""Composition API types.

- meta: TypeMeta, ObjectMeta, ObjectReference
- composition: Composition, CompositionRevision and their spec types,
  validation-mode resolution
- patches: legacy Patch, EnvironmentPatch and merge policy types
- transforms: Transform tagged union
- connection: ConnectionDetail tagged union
"""
from .composition import (
    COMPOSITION_VALIDATION_MODE_ANNOTATION,
    ComposedTemplate,
    Composition,
    CompositionMode,
    CompositionRevision,
    CompositionRevisionSpec,
    CompositionSpec,
    CompositionValidationMode,
    EnvironmentConfiguration,
    FunctionReference,
    PatchSet,
    PipelineStep,
    StoreConfigReference,
    TypeReference,
    get_validation_mode,
)
from .connection import ConnectionDetail, ConnectionDetailType
from .meta import ObjectMeta, ObjectReference, TypeMeta
from .patches import EnvironmentPatch, MergeOptions, Patch, PatchPolicy, PatchType
from .transforms import (
    MathTransform,
    MathTransformType,
    StringTransform,
    StringTransformType,
    Transform,
    TransformType,
)

__all__ = [
    "COMPOSITION_VALIDATION_MODE_ANNOTATION",
    "ComposedTemplate",
    "Composition",
    "CompositionMode",
    "CompositionRevision",
    "CompositionRevisionSpec",
    "CompositionSpec",
    "CompositionValidationMode",
    "EnvironmentConfiguration",
    "FunctionReference",
    "PatchSet",
    "PipelineStep",
    "StoreConfigReference",
    "TypeReference",
    "get_validation_mode",
    "ConnectionDetail",
    "ConnectionDetailType",
    "ObjectMeta",
    "ObjectReference",
    "TypeMeta",
    "EnvironmentPatch",
    "MergeOptions",
    "Patch",
    "PatchPolicy",
    "PatchType",
    "MathTransform",
    "MathTransformType",
    "StringTransform",
    "StringTransformType",
    "Transform",
    "TransformType",
]
