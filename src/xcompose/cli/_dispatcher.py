"""
Auto-discovery CLI dispatcher for xcompose.

Scans subfolders for commands and registers them automatically: each
non-underscore module in a domain folder is one command and exposes
``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path
from typing import Any

from xcompose.cli._output import OutputFormatter
from xcompose.core.exceptions import XComposeError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def discover_domains() -> dict[str, Path]:
    """Map domain name to directory for every CLI domain subfolder."""
    cli_dir = Path(__file__).parent
    domains = {}
    for item in cli_dir.iterdir():
        if item.is_dir() and not item.name.startswith("_"):
            has_commands = any(
                f.suffix == ".py" and not f.name.startswith("_")
                for f in item.iterdir()
            )
            if has_commands:
                domains[item.name] = item
    return domains


@lru_cache(maxsize=32)
def discover_commands(domain: str) -> dict[str, dict[str, Any]]:
    """Map command name to its module metadata for one domain."""
    domain_dir = Path(__file__).parent / domain
    commands: dict[str, dict[str, Any]] = {}

    for item in domain_dir.glob("*.py"):
        if item.name.startswith("_"):
            continue

        cmd_name = item.stem
        module = importlib.import_module(f"xcompose.cli.{domain}.{cmd_name}")
        commands[cmd_name] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", f"{domain} {cmd_name}"),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }

    return commands


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with auto-discovered domains and commands."""
    parser = argparse.ArgumentParser(
        prog="xcompose",
        description="Composition resolution and patch-and-transform migration tooling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="domain",
        title="domains",
        description="Available command domains",
        metavar="<domain>",
    )

    for domain_name in sorted(discover_domains().keys()):
        domain_commands = discover_commands(domain_name)
        if not domain_commands:
            continue

        domain_parser = subparsers.add_parser(
            domain_name,
            help=f"{domain_name.title()} commands",
        )
        cmd_subparsers = domain_parser.add_subparsers(
            dest="command",
            title="commands",
            description=f"Available {domain_name} commands",
            metavar="<command>",
        )

        for cmd_name, cmd_info in sorted(domain_commands.items()):
            primary_name = cmd_name.replace("_", "-")
            aliases = [cmd_name] if primary_name != cmd_name else []
            cmd_parser = cmd_subparsers.add_parser(
                primary_name,
                aliases=aliases,
                help=cmd_info["summary"],
            )
            if cmd_info["register_args"]:
                cmd_info["register_args"](cmd_parser)
            if cmd_info["main"]:
                cmd_parser.set_defaults(_func=cmd_info["main"])

    return parser


def _get_version() -> str:
    from xcompose import __version__

    return __version__


def _configure_logging(args: argparse.Namespace, json_mode: bool) -> None:
    """Install the file handler configured under ``logging`` (if any)."""
    from xcompose.cli._utils import get_repo_root
    from xcompose.core.config import LoggingConfig
    from xcompose.core.logging import (
        configure_stdlib_logging,
        suppress_lastresort_in_json_mode,
    )

    cfg = LoggingConfig(repo_root=get_repo_root(args))
    if cfg.file is not None:
        configure_stdlib_logging(log_path=cfg.file, level=cfg.level)
    elif json_mode:
        suppress_lastresort_in_json_mode()


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the xcompose CLI.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(list(argv))

    if not args.domain:
        parser.print_help()
        return 0

    func: Callable[[argparse.Namespace], int] | None = getattr(args, "_func", None)
    if func is None:
        domain_parser = parser._subparsers._group_actions[0].choices.get(args.domain)
        if domain_parser:
            domain_parser.print_help()
        return 0

    json_mode = bool(getattr(args, "json", False))
    formatter = OutputFormatter(json_mode=json_mode)
    command_name = f"{args.domain} {args.command}"

    try:
        _configure_logging(args, json_mode)
        logger.debug("Running %s", command_name)
        return int(func(args) or 0)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except XComposeError as e:
        formatter.error(e, error_code=type(e).__name__)
        return 1
    except Exception as e:
        logger.debug("%s failed", command_name, exc_info=True)
        formatter.error(e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
