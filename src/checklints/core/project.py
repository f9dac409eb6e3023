"""Project audit engine.

A run goes through these steps:

1. Load the project's result cache (wiping it first with ``clear_cache``)
2. Register user and external templates
3. Discover and load checklists (remote, user-wide, project-local, explicit)
4. Resolve facts checklist by checklist, registering each checklist's
   templates after its facts
5. Wipe the cache if it was computed with different facts
6. Evaluate every check, consulting the cache
7. Persist the cache and return the aggregated statuses

Any :class:`~checklints.core.exceptions.ChecklintsError` raised along the
way aborts the run; nothing is persisted in that case.
"""
from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Sequence

from checklints.core.cache.remote import RemoteResourceCache, ResourceKind
from checklints.core.cache.results import GCResult, ResultCache
from checklints.core.config.settings import Settings
from checklints.core.discovery import discover_checklist_paths
from checklints.core.evaluation import (
    EvaluationContext,
    compute_fact_value,
    evaluate_check_type,
    evaluate_conditions,
    first_failed_requirement,
)
from checklints.core.models.checklist import Checklist
from checklints.core.models.checks import Check
from checklints.core.models.remote import RemoteFile
from checklints.core.models.status import Status, Statuses
from checklints.core.templates import TemplateRegistry
from checklints.core.utils.paths import CHECKLISTS_DIRNAME, TEMPLATES_DIRNAME, get_cache_dir, get_user_config_dir

logger = logging.getLogger(__name__)


class Project:
    """Audit of one project directory against all applicable checklists."""

    def __init__(
        self,
        root: Path,
        settings: Settings,
        *,
        cache_root: Optional[Path] = None,
        user_config_dir: Optional[Path] = None,
        extra_checklists: Sequence[Path] = (),
    ) -> None:
        """
        Args:
            root: Project directory; check paths are resolved against it
            settings: Effective settings
            cache_root: Root holding per-project caches (default: user cache dir)
            user_config_dir: Directory holding user checklists and templates
                (default: user config dir)
            extra_checklists: Checklist files evaluated after all discovered ones
        """
        self.root = Path(root).resolve()
        self.name = self.root.name or "root"
        self.settings = settings
        self.cache_root = Path(cache_root) if cache_root is not None else get_cache_dir()
        self.user_config_dir = (
            Path(user_config_dir) if user_config_dir is not None else get_user_config_dir()
        )
        self.extra_checklists = tuple(Path(p) for p in extra_checklists)

        self.cache = ResultCache(self.cache_root, self.name, self.root)
        self.templates = TemplateRegistry()
        self.checklists: List[Checklist] = []
        self._facts: Dict[str, str] = {}

    @property
    def facts(self) -> MappingProxyType[str, str]:
        return MappingProxyType(self._facts)

    @property
    def user_checklists_dir(self) -> Path:
        return self.user_config_dir / CHECKLISTS_DIRNAME

    @property
    def user_templates_dir(self) -> Path:
        return self.user_config_dir / TEMPLATES_DIRNAME

    def remote_cache(self) -> RemoteResourceCache:
        return RemoteResourceCache(
            self.cache.remote_directory,
            self.cache.remotes,
            timeout=self.settings.fetch_timeout,
        )

    def iter_checks(self) -> Iterator[Check]:
        for checklist in self.checklists:
            yield from checklist.checks

    # ---- preparation ----

    def load_cache(self) -> ResultCache:
        self.cache = ResultCache.load_or_new(self.cache_root, self.name, self.root)
        if self.settings.clear_cache:
            logger.info("Clearing cache for %s", self.name)
            self.cache = self.cache.clear()
        return self.cache

    def register_shared_templates(self) -> None:
        """Register user templates (when user checklists are enabled) and external templates."""
        if self.settings.user_checklists and self.user_templates_dir.is_dir():
            self.templates.register(self.user_templates_dir, by_name=True)

        remote = self.remote_cache()
        for reference in self.settings.external_templates:
            path = remote.fetch(RemoteFile.parse(reference), ResourceKind.TEMPLATE)
            self.templates.register(path, by_name=True)

    def discover(self) -> List[Checklist]:
        paths = discover_checklist_paths(
            self.root,
            remote_cache=self.remote_cache(),
            remote_references=[RemoteFile.parse(r) for r in self.settings.external_checklists],
            user_dir=self.user_checklists_dir if self.settings.user_checklists else None,
            extra=self.extra_checklists,
        )
        self.checklists = [Checklist.load(path) for path in paths]
        return self.checklists

    def resolve_facts(self) -> Dict[str, str]:
        """Compute every checklist's facts in order, then register its templates."""
        for checklist in self.checklists:
            for fact in checklist.facts:
                value = compute_fact_value(
                    fact,
                    self.facts,
                    checklist_path=checklist.path,
                    cwd=self.root,
                )
                logger.debug("Found fact '%s'='%s' for checklist '%s'", fact.key, value, checklist.name)
                self._facts[fact.key] = value
            for template in checklist.templates():
                self.templates.register(template)
        return dict(self._facts)

    def invalidate_cache(self) -> None:
        """Wipe a cache computed with different facts, then record the current facts."""
        if self.cache.loaded and self.cache.facts_differ(self._facts):
            logger.info("Facts changed since last run; clearing cache for %s", self.name)
            self.cache = self.cache.clear()
        self.cache.set_facts(self._facts)

    def prepare(self) -> None:
        self.load_cache()
        self.register_shared_templates()
        self.discover()
        self.resolve_facts()
        self.invalidate_cache()

    # ---- evaluation ----

    def evaluate(self, check: Check, ctx: EvaluationContext) -> Status:
        """Evaluate one check, serving it from and storing it into the cache."""
        if self.settings.read_cache:
            cached = self.cache.get(check)
            if cached is not None:
                logger.debug("Check '%s' status pulled from cache", check.label)
                return cached

        gate = evaluate_conditions(check.conditions, ctx)
        if gate is not None:
            return gate

        status = first_failed_requirement(
            check.requirements, required_for=f"Required for a check in {ctx.checklist_path}"
        )
        if status is None:
            status = evaluate_check_type(check.check, ctx)

        if self.settings.write_cache:
            self.cache.insert(check, status)
        return status

    def run_checks(self) -> Statuses:
        statuses = Statuses()
        for checklist in self.checklists:
            logger.debug("Running with checklist %s", checklist.name)
            ctx = EvaluationContext(
                project_root=self.root,
                checklist_path=checklist.path,
                facts=self.facts,
                templates=self.templates,
            )
            for check in checklist.checks:
                status = self.evaluate(check, ctx)
                statuses.insert(checklist.path, check.label, status)
                if self.settings.fail_fast and status.is_failure:
                    logger.info("Stopping after first failure: %s", check.label)
                    return statuses
        return statuses

    def run(self) -> Statuses:
        """Prepare, evaluate every check and persist the cache."""
        self.prepare()
        statuses = self.run_checks()
        if self.settings.write_cache:
            self.cache.save()
        return statuses

    # ---- maintenance ----

    def collect_garbage(self, *, dry_run: bool = False) -> GCResult:
        """Drop cache entries for File checks no discovered checklist declares."""
        cache = ResultCache.load(self.cache_root, self.name, self.root)
        if cache is None:
            return GCResult()
        self.cache = cache
        self.discover()
        result = cache.sweep(self.iter_checks(), dry_run=dry_run)
        if not dry_run:
            cache.save()
        return result


__all__ = ["Project"]
