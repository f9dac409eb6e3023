"""
Cache garbage collection command.

SUMMARY: Remove cached results for File checks that no discovered
checklist declares anymore.
"""

from __future__ import annotations

import argparse

from checklints.cli import (
    OutputFormatter,
    add_dry_run_flag,
    add_project_dir_arg,
    add_standard_flags,
    get_project_dir,
    load_cli_settings,
)
from checklints.core.project import Project

SUMMARY = "Remove stale entries from a project's result cache"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register CLI arguments for ``checklints gc``."""
    add_project_dir_arg(parser)
    parser.add_argument(
        "--no-user-checklists",
        action="store_true",
        help="Treat checks from user-wide checklists as stale",
    )
    add_dry_run_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    project = Project(get_project_dir(args), load_cli_settings(args))
    result = project.collect_garbage(dry_run=bool(getattr(args, "dry_run", False)))

    verb = "Would remove" if args.dry_run else "Removed"
    lines = [
        f"{verb} {len(result.removed_paths)} path entries and "
        f"{len(result.removed_checks)} cached results for {project.name}"
    ]
    lines.extend(f"  path: {p}" for p in result.removed_paths)
    formatter.success({"project": project.name, "dry_run": bool(args.dry_run), **result.to_dict()}, "\n".join(lines))
    return 0
