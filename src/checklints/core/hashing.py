"""Content hashing for cache keys.

All digests are SHA-256 hex strings. Files and streams are read in fixed-size
chunks so large inputs never have to fit in memory.
"""
from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, BinaryIO, Mapping

CHUNK_SIZE = 8192


def _new_hasher() -> "hashlib._Hash":
    return hashlib.sha256()


def hash_bytes(data: bytes) -> str:
    """Hash an in-memory buffer."""
    hasher = _new_hasher()
    view = memoryview(data)
    for start in range(0, len(view), CHUNK_SIZE):
        hasher.update(view[start : start + CHUNK_SIZE])
    return hasher.hexdigest()


def hash_stream(stream: BinaryIO) -> str:
    """Hash a binary stream until EOF."""
    hasher = _new_hasher()
    while True:
        chunk = stream.read(CHUNK_SIZE)
        if not chunk:
            break
        hasher.update(chunk)
    return hasher.hexdigest()


def hash_file(path: Path | str) -> str:
    """Hash the contents of the file at ``path``.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    with open(path, "rb") as f:
        return hash_stream(f)


def canonical_json(data: Mapping[str, Any]) -> bytes:
    """Encode ``data`` so that structurally equal mappings yield equal bytes."""
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


def fingerprint(data: Mapping[str, Any]) -> str:
    """Return the fingerprint of a definition given as a plain mapping."""
    return hash_bytes(canonical_json(data))


__all__ = [
    "CHUNK_SIZE",
    "hash_bytes",
    "hash_stream",
    "hash_file",
    "canonical_json",
    "fingerprint",
]
