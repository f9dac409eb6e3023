"""Fake network access for remote checklist/template tests."""
from __future__ import annotations

import io
from typing import Dict, List
from urllib.error import URLError


class FakeResponse(io.BytesIO):
    """Minimal stand-in for the object returned by ``urlopen``."""


class FakeUrlopen:
    """Serve fixed bodies by URL and record every request.

    Unknown URLs raise URLError, like an unreachable host.
    """

    def __init__(self, bodies: Dict[str, bytes]) -> None:
        self.bodies = dict(bodies)
        self.calls: List[str] = []

    def __call__(self, url: str, timeout: float | None = None) -> FakeResponse:
        self.calls.append(url)
        if url not in self.bodies:
            raise URLError(f"unreachable: {url}")
        return FakeResponse(self.bodies[url])


def install(monkeypatch, bodies: Dict[str, bytes]) -> FakeUrlopen:
    """Replace the remote cache's ``urlopen`` with a :class:`FakeUrlopen`."""
    fake = FakeUrlopen(bodies)
    monkeypatch.setattr("checklints.core.cache.remote.urlopen", fake)
    return fake
