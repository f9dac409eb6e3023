from __future__ import annotations

from os import PathLike
from typing import Any, Dict, Mapping


class ChecklintsError(Exception):
    """Base exception for checklints.

    Any ChecklintsError raised during a run is fatal: it aborts the run
    before results are persisted.
    """

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(ChecklintsError):
    """Raised when settings are missing, malformed or fail validation."""


class ChecklistError(ChecklintsError):
    """Raised when a checklist cannot be read, parsed or validated."""

    def __init__(
        self,
        message: str,
        *,
        path: str | PathLike[str] | None = None,
        details: Any = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if path:
            ctx["path"] = str(path)
        if details:
            ctx["details"] = details
        super().__init__(message, context=ctx)


class RemoteReferenceError(ChecklintsError, ValueError):
    """Raised when a remote checklist/template reference cannot be parsed."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ChecklintsError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class RemoteFetchError(ChecklintsError):
    """Raised when a remote resource cannot be fetched."""


class RemoteIntegrityError(RemoteFetchError):
    """Raised when fetched content does not match its pinned hash."""


class FactError(ChecklintsError):
    """Raised when a fact's requirements fail or its value cannot be computed."""


class PipelineError(ChecklintsError):
    """Raised when a command pipeline cannot be parsed, resolved or spawned."""


class TemplateError(ChecklintsError):
    """Raised when a template is missing or fails to render."""


class CacheError(ChecklintsError):
    """Raised when on-disk cache files are unreadable or corrupt."""


__all__ = [
    "ChecklintsError",
    "ConfigError",
    "ChecklistError",
    "RemoteReferenceError",
    "RemoteFetchError",
    "RemoteIntegrityError",
    "FactError",
    "PipelineError",
    "TemplateError",
    "CacheError",
]
