"""JSON tables for the result cache."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .core import PathLike, atomic_write

_MISSING = object()


def read_json(path: PathLike, *, default: Any = _MISSING) -> Any:
    """Parse the JSON file at ``path``.

    Raises:
        FileNotFoundError: If the file is missing and no ``default`` is given
        json.JSONDecodeError: If the file is not valid JSON
    """
    path = Path(path)
    if not path.exists():
        if default is _MISSING:
            raise FileNotFoundError(f"JSON file not found: {path}")
        return default
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json_atomic(path: PathLike, data: Any, *, indent: int = 2) -> None:
    """Write ``data`` with sorted keys so unchanged tables produce identical files."""
    atomic_write(path, lambda f: json.dump(data, f, indent=indent, sort_keys=True, ensure_ascii=False))


__all__ = ["read_json", "write_json_atomic"]
