"""Remote checklist/template references.

Grammar::

    scheme://host[:port][/path][#fragment][::hash]

The optional ``::hash`` suffix pins the expected content hash of the file.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from checklints.core.exceptions import RemoteReferenceError

_HASH_SEPARATOR = "::"

_URL_RE = re.compile(
    r"""
    ^(?P<scheme>[A-Za-z][A-Za-z0-9+.\-]*)://
    (?P<host>[^:/#]+)
    (?::(?P<port>\d+))?
    (?P<path>/[^#]*)?
    (?:\#(?P<fragment>.+))?$
    """,
    re.VERBOSE,
)


@dataclass(frozen=True, slots=True)
class Url:
    scheme: str
    host: str
    port: Optional[int] = None
    path: Optional[str] = None
    fragment: Optional[str] = None

    @property
    def name(self) -> str:
        """Last path segment, falling back to the host."""
        if self.path:
            last = self.path.rstrip("/").rsplit("/", 1)[-1]
            if last:
                return last
        return self.host

    def __str__(self) -> str:
        port = f":{self.port}" if self.port is not None else ""
        path = self.path or ""
        fragment = f"#{self.fragment}" if self.fragment else ""
        return f"{self.scheme}://{self.host}{port}{path}{fragment}"


@dataclass(frozen=True, slots=True)
class RemoteFile:
    url: Url
    hash: Optional[str] = None

    @property
    def name(self) -> str:
        return self.url.name

    @classmethod
    def parse(cls, text: str) -> RemoteFile:
        """Parse a remote reference.

        Raises:
            RemoteReferenceError: If ``text`` does not follow the grammar
        """
        raw = (text or "").strip()
        scheme_end = raw.find("://")
        if scheme_end <= 0:
            raise RemoteReferenceError(f"Missing scheme in remote reference: {text!r}")

        body, sep, pinned = raw[scheme_end + 3 :].partition(_HASH_SEPARATOR)
        if sep and not pinned:
            raise RemoteReferenceError(f"Empty hash in remote reference: {text!r}")

        m = _URL_RE.match(raw[: scheme_end + 3] + body)
        if m is None:
            raise RemoteReferenceError(f"Invalid remote reference: {text!r}")

        port = m.group("port")
        url = Url(
            scheme=m.group("scheme"),
            host=m.group("host"),
            port=int(port) if port else None,
            path=m.group("path") or None,
            fragment=m.group("fragment") or None,
        )
        return cls(url=url, hash=pinned or None)

    def __str__(self) -> str:
        if self.hash:
            return f"{self.url}{_HASH_SEPARATOR}{self.hash}"
        return str(self.url)


__all__ = ["Url", "RemoteFile"]
