"""Checklist documents.

A checklist is a TOML file with top-level arrays of tables::

    [[fact]]
    key = "author"
    type = "eval-command"
    command = "git config user.name"

    [[check]]
    type = "file"
    path = "LICENSE"
    template = "templates/LICENSE.j2"
"""
from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from checklints.core.exceptions import ChecklistError
from checklints.core.models.checks import Check, Condition, FileCheck
from checklints.core.models.facts import Fact
from checklints.core.models.requirements import Requirement, requirement_from_dict
from checklints.core.schemas import SchemaValidationError, validate_payload

logger = logging.getLogger(__name__)

SCHEMA_NAME = "checklist.schema"


@dataclass(frozen=True, slots=True)
class Checklist:
    """A parsed checklist, identified by its source path.

    Top-level ``conditions`` and ``requirements`` are parsed and kept but
    do not take part in evaluation.
    """

    path: Path
    facts: Tuple[Fact, ...] = field(default_factory=tuple)
    conditions: Tuple[Condition, ...] = field(default_factory=tuple)
    checks: Tuple[Check, ...] = field(default_factory=tuple)
    requirements: Tuple[Requirement, ...] = field(default_factory=tuple)

    @property
    def name(self) -> str:
        return str(self.path)

    @property
    def directory(self) -> Path:
        return self.path.parent

    def templates(self) -> List[Path]:
        """Template paths of this checklist's File checks, resolved against its directory."""
        out: List[Path] = []
        for check in self.checks:
            if isinstance(check.check, FileCheck) and check.check.template:
                out.append(self.directory / check.check.template)
        return out

    @classmethod
    def from_dict(cls, path: Path, data: Dict[str, Any]) -> Checklist:
        return cls(
            path=Path(path),
            facts=tuple(Fact.from_dict(f) for f in data.get("fact") or ()),
            conditions=tuple(Condition.from_dict(c) for c in data.get("condition") or ()),
            checks=tuple(Check.from_dict(c) for c in data.get("check") or ()),
            requirements=tuple(requirement_from_dict(r) for r in data.get("requires") or ()),
        )

    @classmethod
    def load(cls, path: Path) -> Checklist:
        """Read, validate and parse a checklist file.

        Raises:
            ChecklistError: If the file is unreadable, not valid TOML or does
                not match the checklist schema
        """
        path = Path(path)
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise ChecklistError(f"Unable to read checklist {path}: {e}", path=path) from e
        except tomllib.TOMLDecodeError as e:
            raise ChecklistError(f"Invalid TOML in checklist {path}: {e}", path=path) from e

        try:
            validate_payload(data, SCHEMA_NAME)
        except SchemaValidationError as e:
            raise ChecklistError(f"Invalid checklist {path}: {e}", path=path, details=e.errors) from e

        try:
            checklist = cls.from_dict(path, data)
        except (KeyError, ValueError) as e:
            raise ChecklistError(f"Invalid entry in checklist {path}: {e}", path=path) from e

        logger.debug(
            "Loaded checklist %s (%d facts, %d checks)",
            path,
            len(checklist.facts),
            len(checklist.checks),
        )
        return checklist


__all__ = ["Checklist"]
