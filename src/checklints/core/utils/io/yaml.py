"""YAML reading for config files and bundled schemas."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .core import PathLike


def read_yaml(path: PathLike, default: Any = None, raise_on_error: bool = False) -> Any:
    """Load a YAML document with ``yaml.safe_load``.

    An empty document yields ``default``. A missing or unparsable file also
    yields ``default`` unless ``raise_on_error`` is set.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default
    return default if data is None else data


__all__ = ["read_yaml"]
