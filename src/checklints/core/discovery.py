"""Checklist discovery.

Checklists are collected in a fixed order:

1. Remote checklists (``external_checklists``), fetched through the remote cache
2. User-wide checklists: ``*.toml`` in ``<config-dir>/checklists``
3. Project-local checklists: ``*.toml`` in ``.checklists/``, ``checklists/``,
   ``checks/`` and ``.checks/``, then the files ``.checklist.toml`` and
   ``checklist.toml``
4. Checklists named explicitly on the command line
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from checklints.core.cache.remote import RemoteResourceCache, ResourceKind
from checklints.core.exceptions import ChecklistError
from checklints.core.models.remote import RemoteFile

logger = logging.getLogger(__name__)

PROJECT_CHECKLIST_DIRS = (".checklists", "checklists", "checks", ".checks")
PROJECT_CHECKLIST_FILES = (".checklist.toml", "checklist.toml")
CHECKLIST_SUFFIX = ".toml"


def checklists_in_dir(directory: Path) -> List[Path]:
    """``*.toml`` files directly inside ``directory``, sorted by name."""
    return sorted(
        p for p in Path(directory).iterdir() if p.suffix == CHECKLIST_SUFFIX and p.is_file()
    )


def project_checklist_paths(project_root: Path) -> List[Path]:
    paths: List[Path] = []
    for name in PROJECT_CHECKLIST_DIRS:
        directory = project_root / name
        if directory.is_dir():
            paths.extend(checklists_in_dir(directory))
    for name in PROJECT_CHECKLIST_FILES:
        path = project_root / name
        if path.is_file():
            paths.append(path)
    return paths


def user_checklist_paths(user_dir: Path) -> List[Path]:
    """Checklists in the user-wide directory.

    Raises:
        ChecklistError: If the directory does not exist
    """
    if not user_dir.is_dir():
        raise ChecklistError(f"User checklists dir ({user_dir}) does not exist", path=user_dir)
    return checklists_in_dir(user_dir)


def remote_checklist_paths(
    references: Iterable[RemoteFile], remote_cache: RemoteResourceCache
) -> List[Path]:
    return [remote_cache.fetch(ref, ResourceKind.CHECKLIST) for ref in references]


def _dedupe(paths: Iterable[Path]) -> List[Path]:
    seen: set[Path] = set()
    out: List[Path] = []
    for path in paths:
        key = path.resolve()
        if key in seen:
            logger.debug("Skipping duplicate checklist %s", path)
            continue
        seen.add(key)
        out.append(path)
    return out


def discover_checklist_paths(
    project_root: Path,
    *,
    remote_cache: RemoteResourceCache,
    remote_references: Sequence[RemoteFile] = (),
    user_dir: Optional[Path] = None,
    extra: Sequence[Path] = (),
) -> List[Path]:
    """Every checklist path to load, in evaluation order.

    Args:
        project_root: Project directory
        remote_cache: Store used to fetch ``remote_references``
        remote_references: Parsed ``external_checklists``
        user_dir: User-wide checklist directory, or None when disabled
        extra: Additional checklist files (or directories of them) given explicitly

    Raises:
        ChecklistError: If ``user_dir`` is given but missing, or an extra
            checklist does not exist
    """
    paths: List[Path] = []
    paths.extend(remote_checklist_paths(remote_references, remote_cache))
    if user_dir is not None:
        paths.extend(user_checklist_paths(user_dir))
    paths.extend(project_checklist_paths(project_root))
    for path in map(Path, extra):
        if path.is_dir():
            paths.extend(checklists_in_dir(path))
        elif path.is_file():
            paths.append(path)
        else:
            raise ChecklistError(f"Checklist not found: {path}", path=path)

    found = _dedupe(paths)
    logger.debug("Discovered %d checklists", len(found))
    return found


__all__ = [
    "PROJECT_CHECKLIST_DIRS",
    "PROJECT_CHECKLIST_FILES",
    "checklists_in_dir",
    "project_checklist_paths",
    "user_checklist_paths",
    "remote_checklist_paths",
    "discover_checklist_paths",
]
