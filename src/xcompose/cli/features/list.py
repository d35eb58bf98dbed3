"""
xcompose features list command.

SUMMARY: List feature flags and whether each is enabled
"""

from __future__ import annotations

import argparse

from xcompose.cli import OutputFormatter, add_json_flag, add_repo_root_flag, get_repo_root
from xcompose.core.config import FeaturesConfig
from xcompose.core.features import Flag

SUMMARY = "List feature flags and whether each is enabled"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    flags = FeaturesConfig(repo_root=get_repo_root(args)).flags()

    rows = [{"name": f.value, "enabled": flags.enabled(f)} for f in Flag]
    if formatter.json_mode:
        formatter.json_output({"features": rows})
        return 0

    for row in rows:
        mark = "x" if row["enabled"] else " "
        formatter.text(f"[{mark}] {row['name']}")
    return 0
