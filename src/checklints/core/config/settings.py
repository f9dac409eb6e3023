"""Layered settings.

Sources (highest to lowest priority):
1. Command-line flags
2. Environment variables: ``CHECKLINTS_<OPTION>`` (nested keys use ``__``,
   e.g. ``CHECKLINTS_LOGGING__PATH``)
3. User config file: ``<config-dir>/config.yaml``
4. Bundled defaults: ``checklints.data/config/defaults.yaml``

The merged result is validated against ``config.schema.yaml`` before a
:class:`Settings` is built from it.
"""
from __future__ import annotations

import copy
import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from checklints.core.exceptions import ConfigError
from checklints.core.schemas import SchemaValidationError, validate_payload
from checklints.core.utils.io import ensure_directory, read_yaml, write_text
from checklints.core.utils.merge import deep_merge
from checklints.core.utils.paths import (
    get_config_file,
    get_user_checklists_dir,
    get_user_config_dir,
    get_user_templates_dir,
)
from checklints.data import get_data_path
from checklints.data import read_yaml as read_bundled_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "CHECKLINTS_"
# Read directly by path and logging helpers; never settings keys.
RESERVED_ENV_KEYS = frozenset({"CONFIG_DIR", "CACHE_DIR", "LOG_LEVEL"})
SCHEMA_NAME = "config.schema"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}
_NULL = {"", "none", "null"}


@dataclass(frozen=True)
class Settings:
    user_checklists: bool = True
    fail_fast: bool = False
    no_read_cache: bool = False
    no_write_cache: bool = False
    no_cache: bool = False
    clear_cache: bool = False
    external_checklists: Tuple[str, ...] = field(default_factory=tuple)
    external_templates: Tuple[str, ...] = field(default_factory=tuple)
    fetch_timeout: Optional[float] = None
    log_path: Optional[Path] = None

    @property
    def read_cache(self) -> bool:
        return not (self.no_cache or self.no_read_cache)

    @property
    def write_cache(self) -> bool:
        return not (self.no_cache or self.no_write_cache)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Settings:
        log_path = (data.get("logging") or {}).get("path")
        timeout = data.get("fetch_timeout")
        return cls(
            user_checklists=bool(data["user_checklists"]),
            fail_fast=bool(data["fail_fast"]),
            no_read_cache=bool(data["no_read_cache"]),
            no_write_cache=bool(data["no_write_cache"]),
            no_cache=bool(data["no_cache"]),
            clear_cache=bool(data["clear_cache"]),
            external_checklists=tuple(data["external_checklists"]),
            external_templates=tuple(data["external_templates"]),
            fetch_timeout=float(timeout) if timeout is not None else None,
            log_path=Path(log_path).expanduser() if log_path else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_checklists": self.user_checklists,
            "fail_fast": self.fail_fast,
            "no_read_cache": self.no_read_cache,
            "no_write_cache": self.no_write_cache,
            "no_cache": self.no_cache,
            "clear_cache": self.clear_cache,
            "external_checklists": list(self.external_checklists),
            "external_templates": list(self.external_templates),
            "fetch_timeout": self.fetch_timeout,
            "logging": {"path": str(self.log_path) if self.log_path else None},
        }


def load_defaults() -> Dict[str, Any]:
    """Bundled defaults as a fresh (mutable) dict."""
    return copy.deepcopy(read_bundled_yaml("config", "defaults.yaml"))


def load_config_file(path: Path) -> Dict[str, Any]:
    """Read the user config file; a missing file is an empty layer.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping
    """
    path = Path(path)
    if not path.exists():
        return {}
    try:
        data = read_yaml(path, default={}, raise_on_error=True)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Invalid config file {path}: {e}", context={"path": str(path)}) from e
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}",
            context={"path": str(path)},
        )
    return data


def _as_bool(value: str) -> Optional[bool]:
    low = value.strip().lower()
    if low in _TRUE:
        return True
    if low in _FALSE:
        return False
    return None


def _as_number(value: str) -> Optional[float | int]:
    s = value.strip()
    if re.fullmatch(r"[-+]?\d+", s):
        return int(s)
    if re.fullmatch(r"[-+]?(\d+\.\d*|\d*\.\d+)", s):
        return float(s)
    return None


def _as_list(value: str) -> List[Any]:
    s = value.strip()
    if s.startswith("[") and s.endswith("]"):
        try:
            data = json.loads(s)
        except json.JSONDecodeError as e:
            raise ValueError(f"invalid JSON list: {e}") from e
        return list(data)
    return [part.strip() for part in s.split(",") if part.strip()]


def coerce_env_value(raw: str, default: Any) -> Any:
    """Convert an environment string to the type of the option's default.

    Raises:
        ValueError: If ``raw`` cannot represent that type
    """
    if isinstance(default, bool):
        result = _as_bool(raw)
        if result is None:
            raise ValueError(f"expected a boolean, got {raw!r}")
        return result
    if isinstance(default, list):
        return _as_list(raw)
    if raw.strip().lower() in _NULL:
        return None
    number = _as_number(raw)
    if number is not None:
        return number
    return raw.strip()


def _lookup_default(defaults: Mapping[str, Any], path: List[str]) -> Tuple[bool, Any]:
    current: Any = defaults
    for part in path:
        if not isinstance(current, Mapping) or part not in current:
            return False, None
        current = current[part]
    return True, current


def env_layer(
    defaults: Mapping[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Collect ``CHECKLINTS_*`` overrides for options the defaults know about.

    Raises:
        ConfigError: If a value cannot be coerced to the option's type
    """
    environ = os.environ if environ is None else environ
    layer: Dict[str, Any] = {}
    for key in sorted(environ):
        if not key.startswith(ENV_PREFIX):
            continue
        raw_key = key[len(ENV_PREFIX) :]
        if not raw_key or raw_key in RESERVED_ENV_KEYS:
            continue
        path = [seg.lower() for seg in raw_key.split("__")]
        known, default = _lookup_default(defaults, path)
        if not known or isinstance(default, Mapping):
            logger.debug("Ignoring unknown setting from environment: %s", key)
            continue
        try:
            value = coerce_env_value(environ[key], default)
        except ValueError as e:
            raise ConfigError(f"Invalid value for {key}: {e}", context={"env": key}) from e

        cursor = layer
        for part in path[:-1]:
            cursor = cursor.setdefault(part, {})
        cursor[path[-1]] = value
    return layer


def load_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Merge every layer and build validated settings.

    Args:
        overrides: Highest-priority values, typically from CLI flags; None
            values are ignored
        config_file: User config file (default: ``<config-dir>/config.yaml``)
        environ: Environment to read (default: ``os.environ``)

    Raises:
        ConfigError: If any layer is invalid or a required option is missing
    """
    defaults = load_defaults()
    merged = deep_merge(defaults, load_config_file(config_file or get_config_file()))
    merged = deep_merge(merged, env_layer(defaults, environ))
    merged = deep_merge(merged, {k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        validate_payload(merged, SCHEMA_NAME)
    except SchemaValidationError as e:
        raise ConfigError(f"Invalid settings: {e}", context={"errors": e.errors}) from e

    settings = Settings.from_dict(merged)
    logger.debug("Settings: %s", settings.to_dict())
    return settings


def write_default_config(path: Path, *, force: bool = False) -> bool:
    """Copy the bundled defaults (comments included) to ``path``.

    Returns:
        True if the file was written
    """
    path = Path(path)
    if path.exists() and not force:
        return False
    write_text(path, get_data_path("config", "defaults.yaml").read_text(encoding="utf-8"))
    logger.info("Wrote default config to %s", path)
    return True


def init_user_config(*, force: bool = False) -> List[Path]:
    """Create the user config directory, config file and checklist/template dirs.

    Returns:
        Paths that were created (or overwritten)
    """
    created: List[Path] = []
    config_dir = get_user_config_dir()
    if not config_dir.exists():
        created.append(config_dir)
    ensure_directory(config_dir)

    config_file = get_config_file()
    if write_default_config(config_file, force=force):
        created.append(config_file)

    for directory in (get_user_checklists_dir(), get_user_templates_dir()):
        if not directory.exists():
            ensure_directory(directory)
            created.append(directory)
    return created


__all__ = [
    "Settings",
    "load_defaults",
    "load_config_file",
    "coerce_env_value",
    "env_layer",
    "load_settings",
    "write_default_config",
    "init_user_config",
]
