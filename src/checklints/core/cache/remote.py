"""Local copies of remote checklists and templates.

Files are fetched over HTTP(S), hashed, verified against an optional pinned
hash and only then written under
``remote-checklists/<kind>/<hash prefix>/<name>``, so two remotes sharing a
file name never overwrite each other. The hash -> path registry lives in the
project's result cache so that a pinned reference seen before is served
without touching the network.
"""
from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import MutableMapping, Optional
from urllib.error import URLError
from urllib.request import urlopen

from checklints.core.exceptions import RemoteFetchError, RemoteIntegrityError
from checklints.core.hashing import hash_bytes
from checklints.core.models.remote import RemoteFile, Url
from checklints.core.utils.io import write_bytes

logger = logging.getLogger(__name__)

HASH_PREFIX_LEN = 16


class ResourceKind(str, Enum):
    CHECKLIST = "checklists"
    TEMPLATE = "templates"


def fetch_bytes(url: Url | str, *, timeout: Optional[float] = None) -> bytes:
    """GET ``url`` and return the response body.

    Raises:
        RemoteFetchError: On any network or HTTP error
    """
    target = str(url)
    logger.debug("Fetching %s", target)
    try:
        if timeout is not None:
            response = urlopen(target, timeout=timeout)
        else:
            response = urlopen(target)
        with response:
            return response.read()
    except (URLError, OSError, ValueError) as e:
        raise RemoteFetchError(f"Failed to fetch {target}: {e}", context={"url": target}) from e


def _safe_name(name: str, fallback: str) -> str:
    name = name.replace("/", "_").replace("\\", "_")
    if name in ("", ".", ".."):
        return fallback
    return name


class RemoteResourceCache:
    """Content-addressed store of fetched remote files for one project."""

    def __init__(
        self,
        directory: Path,
        registry: MutableMapping[str, str],
        *,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Args:
            directory: Root of the remote file store (``.../remote-checklists``)
            registry: Content hash -> local path mapping, updated in place
            timeout: Seconds to wait for each fetch (None waits indefinitely)
        """
        self.directory = Path(directory)
        self.registry = registry
        self.timeout = timeout

    def path_for(self, name: str, digest: str, kind: ResourceKind) -> Path:
        return self.directory / kind.value / digest[:HASH_PREFIX_LEN] / name

    def lookup(self, pinned_hash: str) -> Optional[Path]:
        """Return the local copy registered for ``pinned_hash`` if it still exists."""
        known = self.registry.get(pinned_hash)
        if known is None:
            return None
        path = Path(known)
        return path if path.is_file() else None

    def get_or_fetch(
        self,
        name: str,
        url: Url | str,
        pinned_hash: Optional[str],
        kind: ResourceKind,
    ) -> Path:
        """Return a verified local copy of ``url``.

        Raises:
            RemoteFetchError: If the file cannot be fetched
            RemoteIntegrityError: If its hash differs from ``pinned_hash``;
                nothing is written or registered in that case
        """
        if pinned_hash:
            cached = self.lookup(pinned_hash)
            if cached is not None:
                logger.debug("Using cached copy of %s at %s", url, cached)
                return cached

        data = fetch_bytes(url, timeout=self.timeout)
        digest = hash_bytes(data)
        logger.info("Fetched %s (%d bytes, hash %s)", url, len(data), digest)

        if pinned_hash and digest != pinned_hash:
            raise RemoteIntegrityError(
                f"Hash mismatch for {url}: expected {pinned_hash}, got {digest}",
                context={"url": str(url), "expected": pinned_hash, "actual": digest},
            )

        target = self.path_for(_safe_name(name, "remote"), digest, kind)
        write_bytes(target, data)
        self.registry[digest] = str(target)
        return target

    def fetch(self, remote: RemoteFile, kind: ResourceKind) -> Path:
        return self.get_or_fetch(remote.name, remote.url, remote.hash, kind)


__all__ = ["ResourceKind", "RemoteResourceCache", "fetch_bytes"]
