"""Facts: named values derived once and shared with later facts, checks and templates."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Tuple, Union

from checklints.core.models.requirements import Requirement, requirement_from_dict


@dataclass(frozen=True, slots=True)
class LiteralValue:
    TYPE: ClassVar[str] = "literal"

    value: str


@dataclass(frozen=True, slots=True)
class EnvValue:
    TYPE: ClassVar[str] = "env-var"

    var: str


@dataclass(frozen=True, slots=True)
class CommandValue:
    """Output of a command pipeline, run with the facts so far as extra env."""

    TYPE: ClassVar[str] = "eval-command"

    command: str


FactSource = Union[LiteralValue, EnvValue, CommandValue]


@dataclass(frozen=True, slots=True)
class Fact:
    key: str
    source: FactSource
    requirements: Tuple[Requirement, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Fact:
        """Build a fact from its checklist table.

        Env-var facts read the variable named by ``var``, or the fact's own
        ``key`` when ``var`` is omitted.

        Raises:
            ValueError: If the fact type is unknown
        """
        key = str(data["key"])
        kind = data.get("type")
        source: FactSource
        if kind == LiteralValue.TYPE:
            source = LiteralValue(value=str(data["value"]))
        elif kind == EnvValue.TYPE:
            source = EnvValue(var=str(data.get("var") or key))
        elif kind == CommandValue.TYPE:
            source = CommandValue(command=str(data["command"]))
        else:
            raise ValueError(f"Unknown fact type: {kind!r}")

        return cls(
            key=key,
            source=source,
            requirements=tuple(requirement_from_dict(r) for r in data.get("requires") or ()),
        )


__all__ = [
    "LiteralValue",
    "EnvValue",
    "CommandValue",
    "FactSource",
    "Fact",
]
