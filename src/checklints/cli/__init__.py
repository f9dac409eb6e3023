"""
checklints CLI package.

Commands are auto-discovered from ``cli/commands``; each module exposes
``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter, format_statuses, summarize
from ._args import (
    add_dry_run_flag,
    add_force_flag,
    add_json_flag,
    add_project_dir_arg,
    add_standard_flags,
    add_verbose_flag,
)
from ._utils import (
    bootstrap_user_config,
    get_project_dir,
    load_cli_settings,
    settings_overrides,
)

__all__ = [
    # Output formatting
    "OutputFormatter",
    "format_statuses",
    "summarize",
    # Argument helpers
    "add_dry_run_flag",
    "add_force_flag",
    "add_json_flag",
    "add_project_dir_arg",
    "add_standard_flags",
    "add_verbose_flag",
    # Utilities
    "bootstrap_user_config",
    "get_project_dir",
    "load_cli_settings",
    "settings_overrides",
]
