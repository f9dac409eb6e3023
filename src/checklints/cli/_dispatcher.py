"""
Auto-discovery CLI dispatcher for checklints.

Every public module in ``checklints.cli.commands`` becomes a subcommand named
after the module (underscores shown as dashes). A command module exposes
``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import pkgutil
import sys
from collections.abc import Callable
from functools import lru_cache
from types import ModuleType
from typing import NamedTuple

from checklints.cli import commands as commands_pkg
from checklints.cli._output import OutputFormatter
from checklints.core.exceptions import ChecklintsError
from checklints.core.utils.logging import configure_logging

logger = logging.getLogger(__name__)


class CommandSpec(NamedTuple):
    module: ModuleType
    summary: str
    register_args: Callable[[argparse.ArgumentParser], None] | None
    main: Callable[[argparse.Namespace], int] | None


@lru_cache(maxsize=1)
def discover_root_commands() -> dict[str, CommandSpec]:
    """Import every command module, keyed by module name."""
    found: dict[str, CommandSpec] = {}
    for info in sorted(pkgutil.iter_modules(commands_pkg.__path__), key=lambda m: m.name):
        if info.name.startswith("_") or info.ispkg:
            continue
        try:
            module = importlib.import_module(f"{commands_pkg.__name__}.{info.name}")
        except ImportError as e:
            print(f"Warning: Could not import command {info.name}: {e}", file=sys.stderr)
            continue
        found[info.name] = CommandSpec(
            module=module,
            summary=getattr(module, "SUMMARY", info.name),
            register_args=getattr(module, "register_args", None),
            main=getattr(module, "main", None),
        )
    return found


def build_parser() -> argparse.ArgumentParser:
    """Top-level parser with one subparser per discovered command."""
    parser = argparse.ArgumentParser(
        prog="checklints",
        description="Audit a project against declarative TOML checklists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_get_version()}")

    subparsers = parser.add_subparsers(dest="command", title="commands", metavar="<command>")
    for name, spec in discover_root_commands().items():
        dashed = name.replace("_", "-")
        sub = subparsers.add_parser(
            dashed,
            aliases=[name] if dashed != name else [],
            help=spec.summary,
        )
        if spec.register_args is not None:
            spec.register_args(sub)
        if spec.main is not None:
            sub.set_defaults(_func=spec.main)
    return parser


def _get_version() -> str:
    from checklints import __version__

    return __version__


def main(argv: list[str] | None = None) -> int:
    """
    Entry point of the ``checklints`` console script.

    Returns:
        The command's exit code; 1 when it raised, 130 when interrupted
    """
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    func: Callable[[argparse.Namespace], int] | None = getattr(args, "_func", None)
    if not args.command or func is None:
        parser.print_help()
        return 0 if not args.command else 1

    configure_logging(verbose=bool(getattr(args, "verbose", False)))
    formatter = OutputFormatter(json_mode=bool(getattr(args, "json", False)))

    try:
        return func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except ChecklintsError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        formatter.error(e)
        return 1
    except Exception as e:
        logger.debug("Command %s crashed", args.command, exc_info=True)
        formatter.error(e, error_code="internal_error")
        return 1


if __name__ == "__main__":
    sys.exit(main())
