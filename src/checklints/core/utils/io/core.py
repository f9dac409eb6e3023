"""File primitives shared by the cache, config and remote stores.

Every write goes through :func:`atomic_write`: a temp file in the target's
directory is written, fsync'd and renamed over the target, so readers see
either the old file or the new one.
"""
from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import IO, Callable, Optional, Union

PathLike = Union[str, Path]


def ensure_directory(path: PathLike) -> Path:
    """Create ``path`` (and parents) if missing and return it.

    Raises:
        NotADirectoryError: If ``path`` exists but is not a directory
    """
    path = Path(path)
    if path.exists() and not path.is_dir():
        raise NotADirectoryError(f"Path exists but is not a directory: {path}")
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(
    path: PathLike,
    write_fn: Callable[[IO], None],
    *,
    binary: bool = False,
    encoding: str = "utf-8",
) -> None:
    """Replace ``path`` with what ``write_fn`` writes, atomically.

    The parent directory is created if needed. On failure the target is left
    untouched and the temp file is removed.
    """
    path = Path(path)
    ensure_directory(path.parent)

    tmp: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "wb" if binary else "w",
            encoding=None if binary else encoding,
            dir=path.parent,
            prefix=f".{path.name}.",
            delete=False,
        ) as f:
            tmp = Path(f.name)
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
        tmp = None
    finally:
        if tmp is not None:
            tmp.unlink(missing_ok=True)


def write_text(path: PathLike, content: str) -> None:
    atomic_write(path, lambda f: f.write(content))


def write_bytes(path: PathLike, content: bytes) -> None:
    atomic_write(path, lambda f: f.write(content), binary=True)


def remove_tree(path: PathLike) -> bool:
    """Delete a directory tree; returns False when there was nothing to delete."""
    path = Path(path)
    if not path.exists():
        return False
    shutil.rmtree(path)
    return True


__all__ = [
    "PathLike",
    "ensure_directory",
    "atomic_write",
    "write_text",
    "write_bytes",
    "remove_tree",
]
