"""
checklints data resource helpers.

Provides utilities for accessing bundled configuration defaults and schemas
using importlib.resources.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a data file or directory.

    Args:
        subpackage: Name of the data subpackage (e.g., "config", "schemas")
        filename: Optional filename within the subpackage

    Example:
        >>> get_data_path("config", "defaults.yaml")
        PosixPath('/path/to/checklints/data/config/defaults.yaml')
    """
    pkg = resources.files("checklints.data")
    base = Path(str(pkg / subpackage))
    return base / filename if filename else base


@lru_cache(maxsize=16)
def read_yaml(subpackage: str, filename: str) -> dict[str, Any]:
    """
    Read and parse a bundled YAML data file (cached).

    Raises:
        FileNotFoundError: If the data file does not exist
    """
    path = get_data_path(subpackage, filename)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    return data if isinstance(data, dict) else {}


__all__ = ["get_data_path", "read_yaml"]
