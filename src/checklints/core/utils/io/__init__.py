"""Atomic file writes plus JSON and YAML helpers."""
from __future__ import annotations

from .core import PathLike, atomic_write, ensure_directory, remove_tree, write_bytes, write_text
from .json import read_json, write_json_atomic
from .yaml import read_yaml

__all__ = [
    "PathLike",
    "atomic_write",
    "ensure_directory",
    "remove_tree",
    "write_bytes",
    "write_text",
    "read_json",
    "write_json_atomic",
    "read_yaml",
]
