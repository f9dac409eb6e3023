"""Result cache and remote resource cache."""
from __future__ import annotations

from .remote import RemoteResourceCache, ResourceKind, fetch_bytes
from .results import REMOTE_DIRNAME, GCResult, ResultCache

__all__ = [
    "GCResult",
    "REMOTE_DIRNAME",
    "RemoteResourceCache",
    "ResourceKind",
    "ResultCache",
    "fetch_bytes",
]
