"""
xcompose composition validation-mode command.

SUMMARY: Show the schema-aware validation mode of a composition
"""

from __future__ import annotations

import argparse

from xcompose.cli import OutputFormatter, add_json_flag, load_yaml_document
from xcompose.core.apis.composition import COMPOSITION_VALIDATION_MODE_ANNOTATION, Composition

SUMMARY = "Show the schema-aware validation mode of a composition"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", help="YAML file holding a Composition")
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    comp = Composition.from_dict(load_yaml_document(args.input))
    mode = comp.get_validation_mode()
    formatter.success(
        {
            "name": comp.metadata.name,
            "mode": mode.value,
            "annotation": COMPOSITION_VALIDATION_MODE_ANNOTATION,
        },
        f"{comp.metadata.name or '<unnamed>'}: {mode.value}",
    )
    return 0
