"""Patch-and-transform to function pipeline migration.

- converter: convert_to_pipeline() and the field/policy migration helpers
- input: types of the patch-and-transform function input document
"""
from .converter import (
    DEFAULT_FUNCTION_REF_NAME,
    PIPELINE_STEP_NAME,
    convert_document,
    convert_to_pipeline,
    migrate_merge_options,
    migrate_patch_policy,
)
from .input import INPUT_API_VERSION, INPUT_KIND, ToFieldPathPolicy

__all__ = [
    "DEFAULT_FUNCTION_REF_NAME",
    "PIPELINE_STEP_NAME",
    "convert_document",
    "convert_to_pipeline",
    "migrate_merge_options",
    "migrate_patch_policy",
    "INPUT_API_VERSION",
    "INPUT_KIND",
    "ToFieldPathPolicy",
]
