"""Shared schema validation utilities.

Schemas are JSON Schema documents written as YAML and bundled under
``xcompose/data/schemas``.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from xcompose.core.exceptions import XComposeError
from xcompose.core.utils.io import read_yaml
from xcompose.data import get_data_path


class SchemaValidationError(XComposeError, ValueError):
    """Raised when a payload does not satisfy its schema."""


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema, appending ``.yaml`` if no extension is given.

    Raises:
        FileNotFoundError: If the schema file doesn't exist.
        ValueError: If the schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.yaml"

    schema_path = get_data_path("schemas", schema_name)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    schema = read_yaml(schema_path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def _format_errors(payload: Any, schema: Dict[str, Any]) -> List[str]:
    validator = Draft202012Validator(schema)
    errors: List[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: str(e.path)):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


def validate_payload(payload: Dict[str, Any], schema_name: str) -> None:
    """Validate a payload against a bundled schema.

    Raises:
        SchemaValidationError: If validation fails; ``context["errors"]``
            lists every violation.
    """
    errors = _format_errors(payload, load_schema(schema_name))
    if errors:
        raise SchemaValidationError(
            f"Validation failed against schema '{schema_name}': {errors[0]}",
            context={"schema": schema_name, "errors": errors},
        )


def validate_payload_safe(payload: Dict[str, Any], schema_name: str) -> List[str]:
    """Validate a payload and return error messages (empty if valid)."""
    try:
        schema = load_schema(schema_name)
    except (OSError, ValueError) as e:
        return [f"Schema loading failed: {e}"]
    return _format_errors(payload, schema)


__all__ = [
    "load_schema",
    "validate_payload",
    "validate_payload_safe",
    "SchemaValidationError",
]
