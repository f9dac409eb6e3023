"""Layering of settings mappings (defaults < config file < env < CLI)."""
from __future__ import annotations

from typing import Any, Dict


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``base`` with ``override`` laid on top; neither input is mutated.

    Nested mappings merge key by key. Every other value, lists included,
    replaces whatever the lower layer held.
    """
    merged: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        lower = merged.get(key)
        if isinstance(lower, dict) and isinstance(value, dict):
            merged[key] = deep_merge(lower, value)
        elif isinstance(value, list):
            merged[key] = list(value)
        else:
            merged[key] = value
    return merged


__all__ = ["deep_merge"]
