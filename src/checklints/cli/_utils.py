"""Shared CLI utilities."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from checklints.core.config import Settings, init_user_config, load_settings
from checklints.core.exceptions import ConfigError
from checklints.core.utils.logging import configure_logging
from checklints.core.utils.paths import get_config_file

logger = logging.getLogger(__name__)


def get_project_dir(args: argparse.Namespace) -> Path:
    """Resolve the PROJECT_DIR argument (default: current directory).

    Raises:
        ConfigError: If the path is not an existing directory
    """
    raw = getattr(args, "project_dir", None)
    path = Path(raw).expanduser() if raw else Path.cwd()
    if not path.is_dir():
        raise ConfigError(f"Project directory does not exist: {path}", context={"path": str(path)})
    return path.resolve()


def bootstrap_user_config() -> None:
    """Create the default config file and user directories on first use."""
    if get_config_file().exists():
        return
    for path in init_user_config():
        logger.info("Created %s", path)


def _true_or_none(value: Any) -> Optional[bool]:
    return True if value else None


def settings_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Settings given as flags; absent flags do not override lower layers."""
    overrides: Dict[str, Any] = {
        "no_cache": _true_or_none(getattr(args, "no_cache", False)),
        "no_read_cache": _true_or_none(getattr(args, "no_read_cache", False)),
        "no_write_cache": _true_or_none(getattr(args, "no_write_cache", False)),
        "clear_cache": _true_or_none(getattr(args, "clear_cache", False)),
        "fail_fast": _true_or_none(getattr(args, "fail_fast", False)),
        "external_checklists": getattr(args, "external_checklists", None) or None,
        "external_templates": getattr(args, "external_templates", None) or None,
    }
    if getattr(args, "no_user_checklists", False):
        overrides["user_checklists"] = False
    return overrides


def load_cli_settings(args: argparse.Namespace) -> Settings:
    """Bootstrap the user config, load settings and apply the log file setting."""
    bootstrap_user_config()
    settings = load_settings(settings_overrides(args))
    if settings.log_path is not None:
        configure_logging(verbose=bool(getattr(args, "verbose", False)), log_path=settings.log_path)
    return settings


__all__ = [
    "get_project_dir",
    "bootstrap_user_config",
    "settings_overrides",
    "load_cli_settings",
]
