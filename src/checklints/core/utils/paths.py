"""User-level directory resolution.

Precedence (highest to lowest) for the config directory:
1. ``$CHECKLINTS_CONFIG_DIR``
2. ``$XDG_CONFIG_HOME/checklints``
3. ``~/.config/checklints``

The cache directory follows the same pattern with ``CHECKLINTS_CACHE_DIR``,
``XDG_CACHE_HOME`` and ``~/.cache``.
"""
from __future__ import annotations

import os
from pathlib import Path

from checklints.core.utils.io import ensure_directory

APP_NAME = "checklints"
CONFIG_FILENAME = "config.yaml"
CHECKLISTS_DIRNAME = "checklists"
TEMPLATES_DIRNAME = "templates"


def _resolve(override_var: str, xdg_var: str, fallback: str) -> Path:
    override = os.environ.get(override_var, "").strip()
    if override:
        return Path(override).expanduser().resolve()
    xdg = os.environ.get(xdg_var, "").strip()
    if xdg:
        return Path(xdg).expanduser().resolve() / APP_NAME
    return Path.home() / fallback / APP_NAME


def get_user_config_dir(*, create: bool = False) -> Path:
    """Return the user config directory (absolute)."""
    path = _resolve("CHECKLINTS_CONFIG_DIR", "XDG_CONFIG_HOME", ".config")
    return ensure_directory(path) if create else path


def get_cache_dir(*, create: bool = False) -> Path:
    """Return the root directory holding per-project caches (absolute)."""
    path = _resolve("CHECKLINTS_CACHE_DIR", "XDG_CACHE_HOME", ".cache")
    return ensure_directory(path) if create else path


def get_config_file() -> Path:
    return get_user_config_dir() / CONFIG_FILENAME


def get_user_checklists_dir() -> Path:
    return get_user_config_dir() / CHECKLISTS_DIRNAME


def get_user_templates_dir() -> Path:
    return get_user_config_dir() / TEMPLATES_DIRNAME


__all__ = [
    "CONFIG_FILENAME",
    "CHECKLISTS_DIRNAME",
    "TEMPLATES_DIRNAME",
    "get_user_config_dir",
    "get_cache_dir",
    "get_config_file",
    "get_user_checklists_dir",
    "get_user_templates_dir",
]
