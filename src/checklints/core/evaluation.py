"""Evaluation of requirements, conditions, check variants and facts.

Outcomes of checks are data (:class:`Status`); only problems that make the
whole run meaningless (a fact that cannot be computed, a missing template)
raise.
"""
from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from checklints.core.diff import line_diff
from checklints.core.exceptions import FactError
from checklints.core.models.checks import (
    Check,
    CheckType,
    CommandCheck,
    Condition,
    DirectoryCheck,
    FileCheck,
    HttpCheck,
    VarCheck,
)
from checklints.core.models.facts import CommandValue, EnvValue, Fact, LiteralValue
from checklints.core.models.requirements import CommandRequirement, EnvRequirement, Requirement
from checklints.core.models.status import Status, StatusKind
from checklints.core.templates import TemplateRegistry
from checklints.core.utils.subprocess import run_pipeline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationContext:
    """Everything a check needs besides its own definition.

    Attributes:
        project_root: Directory check paths are resolved against
        checklist_path: Checklist declaring the check (templates are relative to it)
        facts: Facts map at evaluation time (read-only)
        templates: Registry holding every registered template
    """

    project_root: Path
    checklist_path: Path
    facts: Mapping[str, str]
    templates: TemplateRegistry

    def resolve(self, path: str) -> Path:
        return self.project_root / path


def evaluate_requirement(requirement: Requirement, *, required_for: str) -> Status:
    """Pass, or Fail naming the missing command/variable and what needed it."""
    if isinstance(requirement, CommandRequirement):
        if shutil.which(requirement.command) is None:
            return Status.fail(f"Command not found '{requirement.command}'", required_for)
        return Status.passed()
    if isinstance(requirement, EnvRequirement):
        if requirement.key not in os.environ:
            return Status.fail(f"Env var '{requirement.key}' not set", required_for)
        return Status.passed()
    raise TypeError(f"Unsupported requirement: {requirement!r}")


def first_failed_requirement(
    requirements: Sequence[Requirement], *, required_for: str
) -> Optional[Status]:
    for requirement in requirements:
        status = evaluate_requirement(requirement, required_for=required_for)
        if status.is_failure:
            return status
    return None


def evaluate_file(check: FileCheck, ctx: EvaluationContext) -> Status:
    target = ctx.resolve(check.path)
    if not target.is_file():
        return Status.fail("Path is not a valid file", check.path)

    actual = target.read_text(encoding="utf-8", errors="replace")

    if check.contents is not None:
        diff = line_diff(check.contents, actual)
        if diff is not None:
            return Status.fail("Contents differ", diff)

    for fragment in check.contains:
        if fragment not in actual:
            return Status.fail("Expected fragment not found in file", f"{check.path}\n{fragment}")

    if check.template is not None:
        template = str(ctx.checklist_path.parent / check.template)
        logger.debug("Checking %s against template %s", check.path, template)
        expected = ctx.templates.render(template, ctx.facts)
        diff = line_diff(expected, actual)
        if diff is not None:
            return Status.fail("Populated template does not match file", diff)

    return Status.passed()


def evaluate_directory(check: DirectoryCheck, ctx: EvaluationContext) -> Status:
    target = ctx.resolve(check.path)
    if not target.is_dir():
        return Status.fail("Path is not a valid directory", check.path)

    children = {entry.name for entry in target.iterdir()}

    if check.contents and set(check.contents) != children:
        diff = line_diff("\n".join(sorted(set(check.contents))), "\n".join(sorted(children)))
        return Status.fail("Contents differ", diff)

    for name in check.contains:
        if name not in children:
            return Status.fail(
                "Expected entry not found in directory",
                f"dir: {check.path}, path: {Path(check.path) / name}",
            )

    return Status.passed()


def evaluate_check_type(check: CheckType, ctx: EvaluationContext) -> Status:
    """Run the variant-specific logic for ``check``."""
    if isinstance(check, FileCheck):
        return evaluate_file(check, ctx)
    if isinstance(check, DirectoryCheck):
        return evaluate_directory(check, ctx)
    if isinstance(check, (CommandCheck, HttpCheck, VarCheck)):
        return Status.not_implemented(f"Check type '{check.TYPE}' is not implemented")
    raise TypeError(f"Unsupported check type: {check!r}")


def evaluate_conditions(conditions: Sequence[Condition], ctx: EvaluationContext) -> Optional[Status]:
    """Return the Skip that gates a check, or None when every condition passes.

    A skipped condition skips the check as is; a failed or unimplemented one
    skips it with the condition's reason as detail.
    """
    for condition in conditions:
        status = evaluate_check_type(condition.check, ctx)
        if status.kind is StatusKind.PASS:
            continue
        if status.kind is StatusKind.SKIP:
            return status
        return Status.skip(
            f"Condition not met: {condition.label}",
            str(status.reason) if status.reason is not None else None,
        )
    return None


def evaluate_check(check: Check, ctx: EvaluationContext) -> Status:
    """Conditions, then requirements, then the check's own logic (no cache)."""
    gate = evaluate_conditions(check.conditions, ctx)
    if gate is not None:
        return gate
    failed = first_failed_requirement(
        check.requirements, required_for=f"Required for a check in {ctx.checklist_path}"
    )
    if failed is not None:
        return failed
    return evaluate_check_type(check.check, ctx)


def compute_fact_value(
    fact: Fact,
    facts: Mapping[str, str],
    *,
    checklist_path: Path,
    cwd: Optional[Path] = None,
) -> str:
    """Compute ``fact``'s value given the facts resolved so far.

    Raises:
        FactError: If a requirement fails, the variable is unset or the
            command fails or prints nothing
        PipelineError: If the command cannot be parsed or started
    """
    failed = first_failed_requirement(
        fact.requirements, required_for=f"Required for a fact in {checklist_path}"
    )
    if failed is not None:
        raise FactError(str(failed.reason), context={"fact": fact.key, "checklist": str(checklist_path)})

    source = fact.source
    if isinstance(source, LiteralValue):
        return source.value

    if isinstance(source, EnvValue):
        value = os.environ.get(source.var)
        if value is None:
            raise FactError(
                f"Env var '{source.var}' not set for fact '{fact.key}'",
                context={"fact": fact.key, "checklist": str(checklist_path)},
            )
        return value

    if isinstance(source, CommandValue):
        output = run_pipeline(source.command, facts, cwd=cwd)
        if not output.ok:
            raise FactError(
                f"Command for fact '{fact.key}' exited with {output.code}: {source.command}",
                context={"fact": fact.key, "stderr": output.stderr},
            )
        if output.stdout is None:
            raise FactError(
                f"Command for fact '{fact.key}' produced no output: {source.command}",
                context={"fact": fact.key},
            )
        return output.stdout

    raise TypeError(f"Unsupported fact source: {source!r}")


__all__ = [
    "EvaluationContext",
    "evaluate_requirement",
    "first_failed_requirement",
    "evaluate_file",
    "evaluate_directory",
    "evaluate_check_type",
    "evaluate_conditions",
    "evaluate_check",
    "compute_fact_value",
]
