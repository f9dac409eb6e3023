"""Check definitions.

A check is one of a closed set of variants (file, directory, command, http,
varset) wrapped in a :class:`Check` that carries the description, guarding
conditions and requirements. Every dataclass here is frozen; the canonical
``to_dict()`` form is what the result cache fingerprints.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

from checklints.core.hashing import fingerprint
from checklints.core.models.requirements import Requirement, requirement_from_dict


class HttpMethod(str, Enum):
    GET = "Get"
    POST = "Post"
    PUT = "Put"
    DELETE = "Delete"
    HEAD = "Head"
    CONNECT = "Connect"
    OPTIONS = "Options"
    TRACE = "Trace"
    PATCH = "Patch"


def _str_tuple(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(str(v) for v in value)


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


@dataclass(frozen=True, slots=True)
class FileCheck:
    """A regular file that must exist, optionally with known contents.

    Attributes:
        path: File path, relative to the project root
        contents: Exact expected contents (compared trimmed)
        contains: Fragments that must each occur in the file
        template: Template rendered with facts and compared to the file,
            relative to the declaring checklist's directory
    """

    TYPE: ClassVar[str] = "file"

    path: str
    contents: Optional[str] = None
    contains: Tuple[str, ...] = ()
    template: Optional[str] = None

    def describe(self) -> str:
        s = f"File {self.path}: must exist"
        if self.contains:
            s += f", must contain {list(self.contains)!r}"
        if self.contents is not None:
            s += f", contents must exactly match {self.contents!r}"
        if self.template is not None:
            s += f", must match template {self.template}"
        return s

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.TYPE,
            "path": self.path,
            "contents": self.contents,
            "contains": list(self.contains),
            "template": self.template,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FileCheck:
        return cls(
            path=str(data["path"]),
            contents=_optional_str(data.get("contents")),
            contains=_str_tuple(data.get("contains")),
            template=_optional_str(data.get("template")),
        )


@dataclass(frozen=True, slots=True)
class DirectoryCheck:
    """A directory that must exist.

    Attributes:
        path: Directory path, relative to the project root
        contents: Exhaustive list of immediate children
        contains: Non-exhaustive list of children that must be present
    """

    TYPE: ClassVar[str] = "directory"

    path: str
    contents: Tuple[str, ...] = ()
    contains: Tuple[str, ...] = ()

    def describe(self) -> str:
        s = f"Directory {self.path}: must exist"
        if self.contains:
            s += f", must contain {list(self.contains)!r}"
        if self.contents:
            s += f", contents must exactly match {list(self.contents)!r}"
        return s

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.TYPE,
            "path": self.path,
            "contents": list(self.contents),
            "contains": list(self.contains),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DirectoryCheck:
        return cls(
            path=str(data["path"]),
            contents=_str_tuple(data.get("contents")),
            contains=_str_tuple(data.get("contains")),
        )


@dataclass(frozen=True, slots=True)
class CommandCheck:
    TYPE: ClassVar[str] = "command"

    cmd: str
    code: int = 0
    expected_stdout: Optional[str] = None
    expected_stderr: Optional[str] = None
    stdout_contains: Tuple[str, ...] = ()
    stderr_contains: Tuple[str, ...] = ()

    def describe(self) -> str:
        s = f"Command '{self.cmd}' must exit with {self.code}"
        if self.expected_stdout is not None:
            s += f", stdout must match {self.expected_stdout!r}"
        if self.expected_stderr is not None:
            s += f", stderr must match {self.expected_stderr!r}"
        if self.stdout_contains:
            s += f", stdout must contain {list(self.stdout_contains)!r}"
        if self.stderr_contains:
            s += f", stderr must contain {list(self.stderr_contains)!r}"
        return s

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.TYPE,
            "cmd": self.cmd,
            "code": self.code,
            "expected_stdout": self.expected_stdout,
            "expected_stderr": self.expected_stderr,
            "stdout_contains": list(self.stdout_contains),
            "stderr_contains": list(self.stderr_contains),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CommandCheck:
        return cls(
            cmd=str(data["cmd"]),
            code=int(data.get("code", 0)),
            expected_stdout=_optional_str(data.get("expected_stdout")),
            expected_stderr=_optional_str(data.get("expected_stderr")),
            stdout_contains=_str_tuple(data.get("stdout_contains")),
            stderr_contains=_str_tuple(data.get("stderr_contains")),
        )


@dataclass(frozen=True, slots=True)
class HttpCheck:
    TYPE: ClassVar[str] = "http"

    method: HttpMethod
    url: str
    code: int = 200
    body_contains: Tuple[str, ...] = ()
    expected_body: Optional[str] = None

    def describe(self) -> str:
        s = f"Http {self.method.value} request to {self.url} must return {self.code}"
        if self.expected_body is not None:
            s += f", body must match {self.expected_body!r}"
        if self.body_contains:
            s += f", body must contain {list(self.body_contains)!r}"
        return s

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.TYPE,
            "method": self.method.value,
            "url": self.url,
            "code": self.code,
            "body_contains": list(self.body_contains),
            "expected_body": self.expected_body,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> HttpCheck:
        return cls(
            method=HttpMethod(data["method"]),
            url=str(data["url"]),
            code=int(data.get("code", 200)),
            body_contains=_str_tuple(data.get("body_contains")),
            expected_body=_optional_str(data.get("expected_body")),
        )


@dataclass(frozen=True, slots=True)
class VarCheck:
    """An environment variable that must be set (to ``value`` when given)."""

    TYPE: ClassVar[str] = "varset"

    key: str
    value: Optional[str] = None

    def describe(self) -> str:
        if self.value is not None:
            return f"Var {self.key} must be set to {self.value}"
        return f"Var {self.key} must be set"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.TYPE, "key": self.key, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> VarCheck:
        return cls(key=str(data["key"]), value=_optional_str(data.get("value")))


CheckType = Union[FileCheck, DirectoryCheck, CommandCheck, HttpCheck, VarCheck]

CHECK_TYPES: Dict[str, type] = {
    FileCheck.TYPE: FileCheck,
    DirectoryCheck.TYPE: DirectoryCheck,
    CommandCheck.TYPE: CommandCheck,
    HttpCheck.TYPE: HttpCheck,
    VarCheck.TYPE: VarCheck,
}


def check_type_from_dict(data: Dict[str, Any]) -> CheckType:
    """Build the variant named by ``data["type"]``.

    Raises:
        ValueError: If the type tag is unknown
    """
    kind = data.get("type")
    variant = CHECK_TYPES.get(str(kind))
    if variant is None:
        raise ValueError(f"Unknown check type: {kind!r}")
    return variant.from_dict(data)


@dataclass(frozen=True, slots=True)
class Condition:
    """A check used only to decide whether its parent check applies."""

    check: CheckType
    description: Optional[str] = None

    @property
    def label(self) -> str:
        return self.description or self.check.describe()

    def to_dict(self) -> Dict[str, Any]:
        return {**self.check.to_dict(), "description": self.description}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Condition:
        return cls(
            check=check_type_from_dict(data),
            description=_optional_str(data.get("description")),
        )


@dataclass(frozen=True, slots=True)
class Check:
    check: CheckType
    description: Optional[str] = None
    conditions: Tuple[Condition, ...] = field(default_factory=tuple)
    requirements: Tuple[Requirement, ...] = field(default_factory=tuple)

    @property
    def type_name(self) -> str:
        return self.check.TYPE

    @property
    def label(self) -> str:
        """The explicit description, or one generated from the variant."""
        return self.description or self.check.describe()

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.check.to_dict(),
            "description": self.description,
            "conditions": [c.to_dict() for c in self.conditions],
            "requirements": [r.to_dict() for r in self.requirements],
        }

    def fingerprint(self) -> str:
        return fingerprint(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Check:
        return cls(
            check=check_type_from_dict(data),
            description=_optional_str(data.get("description")),
            conditions=tuple(Condition.from_dict(c) for c in data.get("conditions") or ()),
            requirements=tuple(requirement_from_dict(r) for r in data.get("requirements") or ()),
        )


__all__ = [
    "HttpMethod",
    "FileCheck",
    "DirectoryCheck",
    "CommandCheck",
    "HttpCheck",
    "VarCheck",
    "CheckType",
    "CHECK_TYPES",
    "check_type_from_dict",
    "Condition",
    "Check",
]
