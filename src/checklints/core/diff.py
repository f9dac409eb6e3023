"""Line diffs for failure reasons."""
from __future__ import annotations

import difflib
from typing import Optional


def line_diff(expected: str, actual: str) -> Optional[str]:
    """Unified diff of ``expected`` against ``actual``, or None when equal.

    Both sides are trimmed first, so leading/trailing whitespace (including
    a final newline) never counts as a difference.
    """
    expected = expected.strip()
    actual = actual.strip()
    if expected == actual:
        return None
    lines = difflib.unified_diff(
        expected.splitlines(),
        actual.splitlines(),
        fromfile="expected",
        tofile="actual",
        lineterm="",
    )
    return "\n".join(lines)


__all__ = ["line_diff"]
