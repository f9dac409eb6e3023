"""Settings: bundled defaults, user config file, environment and CLI layers."""
from __future__ import annotations

from .settings import (
    Settings,
    init_user_config,
    load_settings,
    write_default_config,
)

__all__ = ["Settings", "init_user_config", "load_settings", "write_default_config"]
