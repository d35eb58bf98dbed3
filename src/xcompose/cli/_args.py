"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag; configuration is read from <repo-root>/.xcompose."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Override repository root path (default: current directory)",
    )


__all__ = ["add_json_flag", "add_repo_root_flag"]
