"""Evaluation outcomes.

A :class:`Status` is the result of evaluating a check, condition or
requirement. :class:`Statuses` aggregates them per checklist for reporting.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple


class StatusKind(str, Enum):
    PASS = "pass"
    SKIP = "skip"
    FAIL = "fail"
    NOT_IMPLEMENTED = "not-implemented"


@dataclass(frozen=True, slots=True)
class Reason:
    """Why a status is not a plain pass.

    Attributes:
        main: Primary, one-line message
        secondary: Optional detail (a diff, a path, ...)
    """

    main: str
    secondary: Optional[str] = None

    def __str__(self) -> str:
        if self.secondary:
            return f"{self.main}: {self.secondary}"
        return self.main

    def to_dict(self) -> Dict[str, Any]:
        return {"main": self.main, "secondary": self.secondary}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Reason:
        return cls(main=str(data["main"]), secondary=data.get("secondary"))


@dataclass(frozen=True, slots=True)
class Status:
    """Outcome of one evaluation.

    ``cached`` is the only field that changes after creation, and it only
    changes through :meth:`as_cached`, which returns a copy.
    """

    kind: StatusKind
    reason: Optional[Reason] = None
    cached: bool = False

    @classmethod
    def passed(cls) -> Status:
        return cls(StatusKind.PASS)

    @classmethod
    def fail(cls, main: str, secondary: Optional[str] = None) -> Status:
        return cls(StatusKind.FAIL, Reason(main, secondary))

    @classmethod
    def skip(cls, main: str, secondary: Optional[str] = None) -> Status:
        return cls(StatusKind.SKIP, Reason(main, secondary))

    @classmethod
    def not_implemented(cls, main: str, secondary: Optional[str] = None) -> Status:
        return cls(StatusKind.NOT_IMPLEMENTED, Reason(main, secondary))

    def as_cached(self) -> Status:
        return replace(self, cached=True)

    @property
    def is_success(self) -> bool:
        return self.kind is StatusKind.PASS

    @property
    def is_skipped(self) -> bool:
        return self.kind is StatusKind.SKIP

    @property
    def is_failure(self) -> bool:
        return self.kind is StatusKind.FAIL

    @property
    def is_not_implemented(self) -> bool:
        return self.kind is StatusKind.NOT_IMPLEMENTED

    def __str__(self) -> str:
        if self.kind is StatusKind.PASS:
            return "Pass"
        label = {
            StatusKind.SKIP: "Skipped",
            StatusKind.FAIL: "Failed",
            StatusKind.NOT_IMPLEMENTED: "Not implemented",
        }[self.kind]
        return f"{label} ({self.reason})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.kind.value,
            "reason": self.reason.to_dict() if self.reason is not None else None,
            "cached": self.cached,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Status:
        reason = data.get("reason")
        return cls(
            kind=StatusKind(data["status"]),
            reason=Reason.from_dict(reason) if reason else None,
            cached=bool(data.get("cached", False)),
        )


class Statuses:
    """Ordered aggregate: checklist path -> check description -> Status.

    A later status under the same description replaces the earlier one for
    reporting, but :meth:`exit_code` still accounts for every insert.
    """

    def __init__(self) -> None:
        self._map: Dict[Path, Dict[str, Status]] = {}
        self._all_passed = True

    def insert(self, checklist_path: Path, description: str, status: Status) -> None:
        if not status.is_success:
            self._all_passed = False
        self._map.setdefault(Path(checklist_path), {})[description] = status

    def __len__(self) -> int:
        return sum(len(checks) for checks in self._map.values())

    def __iter__(self) -> Iterator[Tuple[Path, Dict[str, Status]]]:
        for path, checks in self._map.items():
            yield path, dict(checks)

    def get(self, checklist_path: Path, description: str) -> Optional[Status]:
        return self._map.get(Path(checklist_path), {}).get(description)

    def all(self) -> Iterator[Status]:
        for checks in self._map.values():
            yield from checks.values()

    def exit_code(self) -> int:
        """0 when every inserted status passed, 1 otherwise."""
        return 0 if self._all_passed else 1

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        return {
            str(path): {name: status.to_dict() for name, status in checks.items()}
            for path, checks in self._map.items()
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


__all__ = ["StatusKind", "Reason", "Status", "Statuses"]
