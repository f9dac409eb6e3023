"""Hard preconditions for facts and checks."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Union


@dataclass(frozen=True, slots=True)
class CommandRequirement:
    """An executable that must resolve on the search path."""

    TYPE: ClassVar[str] = "command"

    command: str

    def describe(self) -> str:
        return f"Command '{self.command}' must be on PATH"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.TYPE, "command": self.command}


@dataclass(frozen=True, slots=True)
class EnvRequirement:
    """An environment variable that must be set."""

    TYPE: ClassVar[str] = "env"

    key: str

    def describe(self) -> str:
        return f"Env var '{self.key}' must be set"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.TYPE, "key": self.key}


Requirement = Union[CommandRequirement, EnvRequirement]


def requirement_from_dict(data: Dict[str, Any]) -> Requirement:
    """Build a requirement from its checklist table.

    Raises:
        ValueError: If the requirement type is unknown
    """
    kind = data.get("type")
    if kind == CommandRequirement.TYPE:
        return CommandRequirement(command=str(data["command"]))
    if kind == EnvRequirement.TYPE:
        return EnvRequirement(key=str(data["key"]))
    raise ValueError(f"Unknown requirement type: {kind!r}")


__all__ = [
    "CommandRequirement",
    "EnvRequirement",
    "Requirement",
    "requirement_from_dict",
]
