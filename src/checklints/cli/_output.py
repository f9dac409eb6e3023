"""Unified CLI output formatting utilities.

Supports both JSON and text output modes for every command.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from checklints.core.exceptions import ChecklintsError
from checklints.core.models.status import Status, Statuses, StatusKind

INDENT = "    "

_LABELS = {
    StatusKind.PASS: "PASS",
    StatusKind.SKIP: "SKIP",
    StatusKind.FAIL: "FAIL",
    StatusKind.NOT_IMPLEMENTED: "TODO",
}


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def success(self, data: Dict[str, Any], message: str, *, status: str = "success") -> None:
        """Output success result (``message`` in text mode, ``data`` in JSON mode)."""
        if self.json_mode:
            output = {"status": status, **data}
            print(json.dumps(output, indent=self.indent, default=str))
        else:
            print(message)

    def error(self, error: Exception | str, message: str | None = None, *, error_code: str = "error") -> None:
        """Output error result to stderr."""
        msg = message or str(error)
        if self.json_mode:
            if isinstance(error, ChecklintsError):
                output = error.to_json_error()
                if message:
                    output["message"] = message
            else:
                output = {"message": msg, "code": error_code, "context": {}}
            print(json.dumps({"error": output}, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        print(message)


def format_status_line(description: str, status: Status) -> List[str]:
    cached = " (cached)" if status.cached else ""
    lines = [f"{INDENT}[{_LABELS[status.kind]}] {description}{cached}"]
    reason = status.reason
    if reason is not None:
        line = f"{INDENT}{INDENT}  - {reason.main}"
        if reason.secondary:
            lines.append(f"{line}:")
            lines.extend(reason.secondary.splitlines())
        else:
            lines.append(line)
    return lines


def format_statuses(statuses: Statuses) -> str:
    """Text report: one section per checklist, one line per check."""
    sections: List[str] = []
    for checklist_path, checks in statuses:
        lines = [f"> Checklist '{Path(checklist_path).name}'"]
        for description, status in checks.items():
            lines.extend(format_status_line(description, status))
        sections.append("\n".join(lines))
    return "\n\n".join(sections)


def summarize(statuses: Statuses) -> Dict[str, int]:
    counts = {kind.value: 0 for kind in StatusKind}
    for status in statuses.all():
        counts[status.kind.value] += 1
    counts["total"] = len(statuses)
    return counts


__all__ = [
    "OutputFormatter",
    "format_status_line",
    "format_statuses",
    "summarize",
]
