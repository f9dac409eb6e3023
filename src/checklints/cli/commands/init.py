"""
User configuration initialization command.

SUMMARY: Write the default config file and create the user checklist and
template directories.
"""

from __future__ import annotations

import argparse

from checklints.cli import OutputFormatter, add_force_flag, add_json_flag
from checklints.core.config import init_user_config
from checklints.core.utils.paths import get_user_config_dir

SUMMARY = "Create the user config file and checklist/template directories"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register CLI arguments for ``checklints init``."""
    add_force_flag(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    created = init_user_config(force=bool(getattr(args, "force", False)))
    config_dir = get_user_config_dir()

    if created:
        message = "\n".join([f"Initialized {config_dir}", *(f"  created {p}" for p in created)])
    else:
        message = f"Already initialized: {config_dir}"
    formatter.success(
        {"config_dir": str(config_dir), "created": [str(p) for p in created]},
        message,
    )
    return 0
