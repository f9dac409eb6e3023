"""
Audit command.

SUMMARY: Run every applicable checklist against a project directory.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from checklints.cli import (
    OutputFormatter,
    add_project_dir_arg,
    add_standard_flags,
    format_statuses,
    get_project_dir,
    load_cli_settings,
    summarize,
)
from checklints.core.project import Project

SUMMARY = "Audit a project against its checklists"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register CLI arguments for ``checklints run``."""
    add_project_dir_arg(parser)
    parser.add_argument(
        "--check",
        "-c",
        dest="checks",
        action="append",
        default=[],
        metavar="CHECK_FILE",
        help="Additional checklist file (or directory of them) to use; repeatable",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Do not read from or write to the cache (implies --no-read-cache and --no-write-cache)",
    )
    parser.add_argument("--no-read-cache", action="store_true", help="Do not read from the cache")
    parser.add_argument("--no-write-cache", action="store_true", help="Do not write to the cache")
    parser.add_argument("--clear-cache", action="store_true", help="Delete the project cache before running")
    parser.add_argument(
        "--no-user-checklists",
        action="store_true",
        help="Do not use user-wide checklists from <config-dir>/checklists",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop after the first failure (default: run all checks)",
    )
    parser.add_argument(
        "--external-checklist",
        dest="external_checklists",
        action="append",
        metavar="REF",
        help="Remote checklist: scheme://host[:port][/path][#fragment][::hash]; repeatable",
    )
    parser.add_argument(
        "--external-template",
        dest="external_templates",
        action="append",
        metavar="REF",
        help="Remote template: scheme://host[:port][/path][#fragment][::hash]; repeatable",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    project_dir = get_project_dir(args)
    settings = load_cli_settings(args)

    project = Project(
        project_dir,
        settings,
        extra_checklists=[Path(p) for p in args.checks],
    )
    statuses = project.run()
    code = statuses.exit_code()

    if formatter.json_mode:
        formatter.json_output(
            {
                "project": str(project.root),
                "exit_code": code,
                "summary": summarize(statuses),
                "checklists": statuses.to_dict(),
            }
        )
    elif len(statuses):
        formatter.text(format_statuses(statuses))
    else:
        formatter.text(f"No checks found for {project.root}")
    return code
