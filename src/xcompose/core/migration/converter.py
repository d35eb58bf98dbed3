"""Convert patch-and-transform compositions to function pipelines.

``convert_to_pipeline`` moves the built-in patch-and-transform configuration
of a legacy composition into the input of a single ``patch-and-transform``
pipeline step. Fields that the built-in engine treated as optional but the
function requires are filled in so the migrated composition behaves the same:

- patch ``type`` defaults to ``FromCompositeFieldPath``
- transform, math and string discriminants are inferred from the populated
  sub-field
- anonymous resource templates are named ``resource-<index>``
- connection detail ``type`` is inferred, and ``name`` defaults to the secret
  key for ``FromConnectionSecretKey`` details
- legacy ``mergeOptions`` become a ``toFieldPath`` policy

The input composition is never modified.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional

from ..apis.composition import (
    ComposedTemplate,
    Composition,
    CompositionMode,
    CompositionSpec,
    EnvironmentConfiguration,
    FunctionReference,
    PatchSet,
    PipelineStep,
)
from ..apis.connection import ConnectionDetail, ConnectionDetailType
from ..apis.meta import now_timestamp
from ..apis.patches import EnvironmentPatch, MergeOptions, Patch, PatchPolicy, PatchType
from ..apis.transforms import (
    MathTransform,
    MathTransformType,
    StringTransform,
    StringTransformType,
    Transform,
    TransformType,
)
from ..exceptions import EmptyInputError
from . import input as pt

logger = logging.getLogger(__name__)

DEFAULT_FUNCTION_REF_NAME = "function-patch-and-transform"
PIPELINE_STEP_NAME = "patch-and-transform"
ERR_NIL_COMPOSITION = "provided Composition is empty"


def convert_to_pipeline(
    comp: Optional[Composition],
    function_name: str = "",
    *,
    step_name: str = PIPELINE_STEP_NAME,
) -> Composition:
    """Return ``comp`` rewritten to run patch-and-transform as a function.

    Args:
        comp: Composition to convert.
        function_name: Function the pipeline step references. Defaults to
            ``function-patch-and-transform`` when empty.
        step_name: Name of the single pipeline step.

    Returns:
        A new pipeline-mode composition, or ``comp`` itself when it is
        already in pipeline mode.

    Raises:
        EmptyInputError: ``comp`` is None.
    """
    if comp is None:
        raise EmptyInputError(ERR_NIL_COMPOSITION)

    if comp.is_pipeline_mode():
        return comp

    metadata = copy.deepcopy(comp.metadata)
    # Avoid a null creationTimestamp in serialized output.
    if not metadata.creation_timestamp:
        metadata.creation_timestamp = now_timestamp()

    spec = CompositionSpec(
        composite_type_ref=copy.deepcopy(comp.spec.composite_type_ref),
        write_connection_secrets_to_namespace=comp.spec.write_connection_secrets_to_namespace,
        publish_connection_details_with_store_config_ref=copy.deepcopy(
            comp.spec.publish_connection_details_with_store_config_ref
        ),
        extra=copy.deepcopy(comp.spec.extra),
    )

    # Environment selection stays on the composition; environment patches
    # are evaluated by the function.
    env_patches: List[EnvironmentPatch] = []
    env = comp.spec.environment
    if env is not None:
        spec.environment = EnvironmentConfiguration(
            environment_configs=copy.deepcopy(env.environment_configs),
            default_data=copy.deepcopy(env.default_data),
            policy=copy.deepcopy(env.policy),
            extra=copy.deepcopy(env.extra),
        )
        env_patches = env.patches

    fn_input = process_function_input(env_patches, comp.spec.patch_sets, comp.spec.resources)

    spec.mode = CompositionMode.PIPELINE.value
    spec.pipeline = [
        PipelineStep(
            step=step_name,
            function_ref=FunctionReference(name=function_name or DEFAULT_FUNCTION_REF_NAME),
            input=fn_input.to_dict(),
        )
    ]

    logger.debug(
        "Converted composition %s: %d patch sets, %d resources, %d environment patches",
        metadata.name,
        len(fn_input.patch_sets),
        len(fn_input.resources),
        len(env_patches),
    )
    return Composition(type_meta=copy.deepcopy(comp.type_meta), metadata=metadata, spec=spec)


def convert_document(doc: Optional[Dict[str, Any]], function_name: str = "", **kwargs: Any) -> Dict[str, Any]:
    """Convert a composition mapping (e.g. loaded from YAML).

    Pipeline-mode documents are returned unchanged.
    """
    if not doc:
        raise EmptyInputError(ERR_NIL_COMPOSITION)
    comp = Composition.from_dict(doc)
    if comp.is_pipeline_mode():
        return doc
    return convert_to_pipeline(comp, function_name, **kwargs).to_dict()


def process_function_input(
    env_patches: List[EnvironmentPatch],
    patch_sets: List[PatchSet],
    resources: List[ComposedTemplate],
) -> pt.Input:
    """Fill in required fields and migrate policies for the function input."""
    environment = migrate_patch_policy_in_environment(
        [set_missing_environment_patch_fields(p) for p in env_patches]
    )
    return pt.Input(
        environment=environment,
        patch_sets=migrate_patch_policy_in_patch_sets([set_missing_patch_set_fields(ps) for ps in patch_sets]),
        resources=migrate_patch_policy_in_resources(
            [set_missing_resource_fields(idx, rs) for idx, rs in enumerate(resources)]
        ),
    )


# ---------------------------------------------------------------------------
# Policy migration
# ---------------------------------------------------------------------------


def migrate_patch_policy_in_resources(resources: List[ComposedTemplate]) -> List[pt.ComposedTemplate]:
    migrated: List[pt.ComposedTemplate] = []
    for resource in resources:
        template = copy.deepcopy(resource)
        patches = migrate_patches(template.patches)
        # The migrated patches replace the legacy ones.
        template.patches = []
        migrated.append(pt.ComposedTemplate(template=template, patches=patches))
    return migrated


def migrate_patch_policy_in_patch_sets(patch_sets: List[PatchSet]) -> List[pt.PatchSet]:
    return [pt.PatchSet(name=ps.name, patches=migrate_patches(ps.patches)) for ps in patch_sets]


def migrate_patch_policy_in_environment(patches: List[EnvironmentPatch]) -> Optional[pt.Environment]:
    if not patches:
        return None
    return pt.Environment(patches=migrate_env_patches(patches))


def migrate_patches(patches: List[Patch]) -> List[pt.Patch]:
    migrated: List[pt.Patch] = []
    for patch in patches:
        new = pt.Patch(patch=copy.deepcopy(patch))
        if patch.policy is not None:
            new.policy = migrate_patch_policy(patch.policy)
            new.patch.policy = None
        migrated.append(new)
    return migrated


def migrate_env_patches(patches: List[EnvironmentPatch]) -> List[pt.EnvironmentPatch]:
    migrated: List[pt.EnvironmentPatch] = []
    for patch in patches:
        new = pt.EnvironmentPatch(patch=copy.deepcopy(patch))
        if patch.policy is not None:
            new.policy = migrate_patch_policy(patch.policy)
            new.patch.policy = None
        migrated.append(new)
    return migrated


def migrate_patch_policy(policy: PatchPolicy) -> Optional[pt.PatchPolicy]:
    """Translate a legacy policy; None means "use the function's defaults"."""
    to = migrate_merge_options(policy.merge_options)
    if to is None and policy.from_field_path is None:
        return None
    return pt.PatchPolicy(from_field_path=policy.from_field_path, to_field_path=to)


def migrate_merge_options(mo: Optional[MergeOptions]) -> Optional[pt.ToFieldPathPolicy]:
    """Map legacy merge options onto a ``toFieldPath`` policy.

    ============  =============  =============================
    appendSlice   keepMapValues  toFieldPath
    ============  =============  =============================
    nil/false     nil/false      ForceMergeObjects
    true          nil/false      ForceMergeObjectsAppendArrays
    nil/false     true           MergeObjects
    true          true           MergeObjectsAppendArrays
    ============  =============  =============================

    No merge options at all returns None, which the function treats as
    Replace.
    """
    if mo is None:
        return None

    if mo.keep_map_values is True:
        if mo.append_slice is True:
            return pt.ToFieldPathPolicy.MERGE_OBJECTS_APPEND_ARRAYS
        return pt.ToFieldPathPolicy.MERGE_OBJECTS

    if mo.append_slice is True:
        return pt.ToFieldPathPolicy.FORCE_MERGE_OBJECTS_APPEND_ARRAYS

    return pt.ToFieldPathPolicy.FORCE_MERGE_OBJECTS


# ---------------------------------------------------------------------------
# Required fields
# ---------------------------------------------------------------------------


def set_missing_patch_set_fields(patch_set: PatchSet) -> PatchSet:
    return PatchSet(name=patch_set.name, patches=[set_missing_patch_fields(p) for p in patch_set.patches])


def set_missing_environment_patch_fields(patch: EnvironmentPatch) -> EnvironmentPatch:
    out = copy.deepcopy(patch)
    if not out.type:
        out.type = PatchType.FROM_COMPOSITE_FIELD_PATH.value
    out.transforms = [set_transform_type_required_fields(t) for t in out.transforms]
    return out


def set_missing_patch_fields(patch: Patch) -> Patch:
    out = copy.deepcopy(patch)
    if not out.type:
        out.type = PatchType.FROM_COMPOSITE_FIELD_PATH.value
    out.transforms = [set_transform_type_required_fields(t) for t in out.transforms]
    return out


def set_missing_resource_fields(idx: int, resource: ComposedTemplate) -> ComposedTemplate:
    out = copy.deepcopy(resource)
    if not out.name:
        out.name = f"resource-{idx}".lower()
    out.connection_details = [set_missing_connection_detail_fields(cd) for cd in out.connection_details]
    out.patches = [set_missing_patch_fields(p) for p in out.patches]
    return out


def set_transform_type_required_fields(transform: Transform) -> Transform:
    """Fill in discriminants the function requires but the engine inferred.

    Discriminants that cannot be inferred stay empty.
    """
    out = copy.deepcopy(transform)
    if not out.type:
        out.type = infer_transform_type(out).value
    if out.type == TransformType.MATH and out.math is not None and not out.math.type:
        out.math.type = infer_math_transform_type(out.math).value
    if out.type == TransformType.STRING and out.string is not None and not out.string.type:
        out.string.type = infer_string_transform_type(out.string).value
    return out


def infer_transform_type(transform: Transform) -> TransformType:
    # String is checked first: when both are populated it wins.
    if transform.string is not None:
        return TransformType.STRING
    if transform.math is not None:
        return TransformType.MATH
    return TransformType.UNSET


def infer_math_transform_type(math: MathTransform) -> MathTransformType:
    if math.clamp_min is not None:
        return MathTransformType.CLAMP_MIN
    if math.clamp_max is not None:
        return MathTransformType.CLAMP_MAX
    if math.multiply is not None:
        return MathTransformType.MULTIPLY
    return MathTransformType.UNSET


def infer_string_transform_type(string: StringTransform) -> StringTransformType:
    if string.fmt is not None:
        return StringTransformType.FORMAT
    if string.convert is not None:
        return StringTransformType.CONVERT
    if string.regexp is not None:
        return StringTransformType.REGEXP
    return StringTransformType.UNSET


def infer_connection_detail_type(detail: ConnectionDetail) -> Optional[ConnectionDetailType]:
    if detail.value is not None:
        return ConnectionDetailType.FROM_VALUE
    if detail.from_field_path is not None:
        return ConnectionDetailType.FROM_FIELD_PATH
    if detail.from_connection_secret_key is not None:
        return ConnectionDetailType.FROM_CONNECTION_SECRET_KEY
    return None


def set_missing_connection_detail_fields(detail: ConnectionDetail) -> ConnectionDetail:
    """Return a copy of ``detail`` with an explicit type and, where derivable, a name.

    Only ``FromConnectionSecretKey`` details get a default name (the secret
    key); value and field-path details without a name are left unnamed.
    """
    out = ConnectionDetail(
        name=detail.name,
        type=detail.type,
        from_connection_secret_key=detail.from_connection_secret_key,
        from_field_path=detail.from_field_path,
        value=detail.value,
    )
    if not out.type:
        inferred = infer_connection_detail_type(out)
        out.type = inferred.value if inferred is not None else None

    if out.name is None and out.type == ConnectionDetailType.FROM_CONNECTION_SECRET_KEY:
        out.name = out.from_connection_secret_key
    return out


__all__ = [
    "DEFAULT_FUNCTION_REF_NAME",
    "PIPELINE_STEP_NAME",
    "ERR_NIL_COMPOSITION",
    "convert_to_pipeline",
    "convert_document",
    "process_function_input",
    "migrate_patch_policy_in_resources",
    "migrate_patch_policy_in_patch_sets",
    "migrate_patch_policy_in_environment",
    "migrate_patches",
    "migrate_env_patches",
    "migrate_patch_policy",
    "migrate_merge_options",
    "set_missing_patch_set_fields",
    "set_missing_environment_patch_fields",
    "set_missing_patch_fields",
    "set_missing_resource_fields",
    "set_transform_type_required_fields",
    "infer_transform_type",
    "infer_math_transform_type",
    "infer_string_transform_type",
    "infer_connection_detail_type",
    "set_missing_connection_detail_fields",
]
