"""
xcompose composite check-fallback command.

SUMMARY: Report whether a composite would be composed by the legacy composer

Evaluates the anonymous-template trigger for XR against REV (a
CompositionRevision, or a Composition treated as its first revision).
Composed resources the XR references are looked up in the files passed
with --resources; references missing from those files are ignored, as
they would be for deleted resources.
"""

from __future__ import annotations

import argparse

from xcompose.cli import OutputFormatter, add_json_flag, load_yaml_document
from xcompose.cli._utils import load_yaml_objects
from xcompose.core.apis.composition import COMPOSITION_KIND, Composition, CompositionRevision
from xcompose.core.composite import CompositionRequest, InMemoryStore, fall_back_for_anonymous_templates
from xcompose.core.context import ReconcileContext
from xcompose.core.resource import Composed, Composite

SUMMARY = "Report whether a composite would be composed by the legacy composer"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--xr", required=True, help="YAML file holding the composite resource")
    parser.add_argument(
        "--revision",
        required=True,
        help="YAML file holding the CompositionRevision (or Composition)",
    )
    parser.add_argument(
        "--resources",
        nargs="*",
        default=[],
        metavar="FILE",
        help="YAML files holding existing composed resources",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Give up after this many seconds",
    )
    add_json_flag(parser)


def _load_revision(path: str) -> CompositionRevision:
    doc = load_yaml_document(path)
    if doc.get("kind") == COMPOSITION_KIND:
        return CompositionRevision.from_composition(Composition.from_dict(doc))
    return CompositionRevision.from_dict(doc)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    xr = Composite(load_yaml_document(args.xr))
    revision = _load_revision(args.revision)

    store = InMemoryStore()
    for path in args.resources:
        for doc in load_yaml_objects(path):
            store.add(Composed(doc))

    ctx = ReconcileContext.background()
    if args.timeout is not None:
        ctx = ctx.with_timeout(args.timeout)

    trigger = fall_back_for_anonymous_templates(store)
    fallback = trigger(ctx, xr, CompositionRequest(revision=revision))

    composer = "legacy" if fallback else "pipeline"
    formatter.success(
        {
            "composite": xr.name,
            "revision": revision.metadata.name,
            "fallback": fallback,
            "composer": composer,
            "anonymousTemplates": revision.anonymous_templates(),
        },
        f"{xr.name or '<unnamed>'}: {composer} composer",
    )
    return 0
