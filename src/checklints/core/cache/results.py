"""Per-project result cache.

Layout under ``<cache-root>/<project>/``::

    <project>-paths.json    check path -> content hash of the file when it last passed
    <project>-checks.json   check fingerprint -> Status
    <project>-facts.json    facts map the cached results were computed with
    <project>-remotes.json  content hash -> local copy of a fetched remote file
    remote-checklists/      fetched remote checklists and templates

Only File checks take part: a hit needs the file's current content hash to
match the hash recorded when a check on it last passed, and a Status stored
under the check's fingerprint.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, MutableMapping, Optional

from checklints.core.exceptions import CacheError
from checklints.core.hashing import hash_file
from checklints.core.models.checks import Check, FileCheck
from checklints.core.models.status import Status
from checklints.core.utils.io import ensure_directory, read_json, remove_tree, write_json_atomic

logger = logging.getLogger(__name__)

PATHS = "paths"
CHECKS = "checks"
FACTS = "facts"
REMOTES = "remotes"
REMOTE_DIRNAME = "remote-checklists"


@dataclass(frozen=True)
class GCResult:
    """Result of a cache sweep.

    Attributes:
        removed_paths: Path entries no File check refers to anymore
        removed_checks: Fingerprints of checks that no longer exist
    """

    removed_paths: tuple[str, ...] = ()
    removed_checks: tuple[str, ...] = ()

    @property
    def total(self) -> int:
        return len(self.removed_paths) + len(self.removed_checks)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "removed_paths": list(self.removed_paths),
            "removed_checks": list(self.removed_checks),
            "total": self.total,
        }


class ResultCache:
    """Check results for one project, keyed by file hash and check fingerprint."""

    def __init__(
        self,
        cache_root: Path,
        project: str,
        project_root: Path,
        *,
        paths: Optional[Mapping[str, str]] = None,
        checks: Optional[Mapping[str, Dict[str, Any]]] = None,
        facts: Optional[Mapping[str, str]] = None,
        remotes: Optional[Mapping[str, str]] = None,
        loaded: bool = False,
    ) -> None:
        self.cache_root = Path(cache_root)
        self.project = project
        self.project_root = Path(project_root)
        self._paths: Dict[str, str] = dict(paths or {})
        self._checks: Dict[str, Dict[str, Any]] = dict(checks or {})
        self._facts: Dict[str, str] = dict(facts or {})
        self.remotes: MutableMapping[str, str] = dict(remotes or {})
        self.loaded = loaded

    @property
    def directory(self) -> Path:
        return self.cache_root / self.project

    @property
    def remote_directory(self) -> Path:
        return self.directory / REMOTE_DIRNAME

    @property
    def facts(self) -> Dict[str, str]:
        return dict(self._facts)

    def __len__(self) -> int:
        return len(self._checks)

    def table_path(self, table: str) -> Path:
        return self.directory / f"{self.project}-{table}.json"

    @classmethod
    def load(cls, cache_root: Path, project: str, project_root: Path) -> Optional[ResultCache]:
        """Load a project's cache from disk.

        Returns None when the paths or checks table is missing.

        Raises:
            CacheError: If a table exists but is unreadable or malformed
        """
        cache = cls(cache_root, project, project_root, loaded=True)
        if not (cache.table_path(PATHS).is_file() and cache.table_path(CHECKS).is_file()):
            logger.debug("No result cache for %s under %s", project, cache.directory)
            return None

        tables: Dict[str, Dict[str, Any]] = {}
        for table in (PATHS, CHECKS, FACTS, REMOTES):
            path = cache.table_path(table)
            try:
                data = read_json(path, default={})
            except (OSError, json.JSONDecodeError) as e:
                raise CacheError(f"Unreadable cache file {path}: {e}", context={"path": str(path)}) from e
            if not isinstance(data, dict):
                raise CacheError(f"Malformed cache file {path}", context={"path": str(path)})
            tables[table] = data

        cache._paths = {str(k): str(v) for k, v in tables[PATHS].items()}
        cache._checks = dict(tables[CHECKS])
        cache._facts = {str(k): str(v) for k, v in tables[FACTS].items()}
        cache.remotes = {str(k): str(v) for k, v in tables[REMOTES].items()}
        logger.debug("Loaded %d cached results for %s", len(cache._checks), project)
        return cache

    @classmethod
    def load_or_new(cls, cache_root: Path, project: str, project_root: Path) -> ResultCache:
        return cls.load(cache_root, project, project_root) or cls(cache_root, project, project_root)

    def save(self) -> None:
        """Write all four tables atomically, creating the directory if needed."""
        ensure_directory(self.directory)
        write_json_atomic(self.table_path(PATHS), self._paths)
        write_json_atomic(self.table_path(CHECKS), self._checks)
        write_json_atomic(self.table_path(FACTS), self._facts)
        write_json_atomic(self.table_path(REMOTES), dict(self.remotes))
        logger.debug("Saved %d cached results to %s", len(self._checks), self.directory)

    def clear(self) -> ResultCache:
        """Delete the project's cache directory and return an empty cache."""
        if remove_tree(self.directory):
            logger.info("Cleared result cache %s", self.directory)
        return ResultCache(self.cache_root, self.project, self.project_root)

    def set_facts(self, facts: Mapping[str, str]) -> None:
        self._facts = dict(facts)

    def facts_differ(self, facts: Mapping[str, str]) -> bool:
        return self._facts != dict(facts)

    def _resolve(self, path: str) -> Path:
        return self.project_root / path

    def _current_hash(self, path: str) -> Optional[str]:
        target = self._resolve(path)
        if not target.is_file():
            return None
        try:
            return hash_file(target)
        except OSError:
            return None

    def get(self, check: Check) -> Optional[Status]:
        """Return the cached Status for ``check``, or None on a miss.

        Directory, command and http checks are not cached yet and varset
        checks never are, so those always miss.
        """
        inner = check.check
        if not isinstance(inner, FileCheck):
            return None

        recorded = self._paths.get(inner.path)
        if recorded is None:
            logger.debug("Cache miss (untracked path): %s", inner.path)
            return None

        if self._current_hash(inner.path) != recorded:
            logger.debug("Cache miss (file changed): %s", inner.path)
            return None

        stored = self._checks.get(check.fingerprint())
        if stored is None:
            logger.debug("Cache miss (unknown check): %s", check.label)
            return None
        status = Status.from_dict(stored)
        # The path table is shared by every check on the file; only a Pass may be replayed.
        if not status.is_success:
            logger.debug("Cache miss (stored %s): %s", status.kind.value, check.label)
            return None
        logger.debug("Cache hit: %s", check.label)
        return status.as_cached()

    def insert(self, check: Check, status: Status) -> Status:
        """Store ``status`` for ``check`` and return it marked as cached.

        The file's hash is only recorded on a pass. Any other outcome forgets
        the recorded hash, so a failing file is re-evaluated until it is fixed.
        """
        status = status.as_cached()
        inner = check.check
        if not isinstance(inner, FileCheck):
            return status

        digest = self._current_hash(inner.path) if status.is_success else None
        if digest is not None:
            self._paths[inner.path] = digest
        else:
            self._paths.pop(inner.path, None)
        self._checks[check.fingerprint()] = status.to_dict()
        return status

    def sweep(self, checks: Iterable[Check], *, dry_run: bool = False) -> GCResult:
        """Drop entries that no File check in ``checks`` refers to."""
        live_paths: set[str] = set()
        live_fingerprints: set[str] = set()
        for check in checks:
            if isinstance(check.check, FileCheck):
                live_paths.add(check.check.path)
                live_fingerprints.add(check.fingerprint())

        stale_paths = sorted(p for p in self._paths if p not in live_paths)
        stale_checks = sorted(f for f in self._checks if f not in live_fingerprints)

        if not dry_run:
            for path in stale_paths:
                del self._paths[path]
            for fp in stale_checks:
                del self._checks[fp]
            logger.info(
                "Swept %d paths and %d results from %s",
                len(stale_paths),
                len(stale_checks),
                self.directory,
            )

        return GCResult(removed_paths=tuple(stale_paths), removed_checks=tuple(stale_checks))


__all__ = ["ResultCache", "GCResult", "REMOTE_DIRNAME"]
