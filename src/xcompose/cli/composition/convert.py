"""
xcompose composition convert command.

SUMMARY: Convert patch-and-transform compositions to a function pipeline

Reads every document of INPUT, converts each resources-mode Composition
into pipeline mode and writes the result as YAML to OUT (or stdout).
Documents of any other kind (including lists and scalars), and
compositions already in pipeline mode, are emitted unchanged. Empty
documents hold no content and are dropped.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from xcompose.cli import OutputFormatter, add_repo_root_flag, get_repo_root
from xcompose.cli._utils import load_yaml_documents
from xcompose.core.apis.composition import COMPOSITION_KIND
from xcompose.core.config import MigrationConfig
from xcompose.core.exceptions import EmptyInputError
from xcompose.core.migration import convert_document
from xcompose.core.utils.io import dump_yaml_string, write_text

SUMMARY = "Convert patch-and-transform compositions to a function pipeline"

logger = logging.getLogger(__name__)


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", help="YAML file holding one or more compositions (- for stdin)")
    parser.add_argument(
        "-o",
        "--output",
        help="Write the converted YAML here instead of stdout",
    )
    parser.add_argument(
        "-f",
        "--function-name",
        default="",
        help="Function referenced by the pipeline step (default: migration.functionName)",
    )
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=False)
    cfg = MigrationConfig(repo_root=get_repo_root(args))
    function_name = args.function_name or cfg.function_name

    docs = load_yaml_documents(args.input)
    if not docs:
        raise EmptyInputError(f"no YAML document found in {args.input}", context={"path": args.input})

    converted = 0
    out_docs = []
    for doc in docs:
        if isinstance(doc, dict) and doc.get("kind") == COMPOSITION_KIND:
            out_docs.append(convert_document(doc, function_name, step_name=cfg.step_name))
            converted += 1
        else:
            out_docs.append(doc)
    logger.debug("Converted %d of %d documents from %s", converted, len(docs), args.input)

    rendered = "---\n".join(dump_yaml_string(d) for d in out_docs)
    if args.output:
        write_text(Path(args.output), rendered)
        formatter.text(f"Wrote {len(out_docs)} document(s) to {args.output}")
    else:
        formatter.text(rendered.rstrip("\n"))
    return 0
