"""Data model: checklists, checks, facts, requirements, statuses and remote references."""
from __future__ import annotations

from .checklist import Checklist
from .checks import (
    CHECK_TYPES,
    Check,
    CheckType,
    CommandCheck,
    Condition,
    DirectoryCheck,
    FileCheck,
    HttpCheck,
    HttpMethod,
    VarCheck,
    check_type_from_dict,
)
from .facts import CommandValue, EnvValue, Fact, FactSource, LiteralValue
from .remote import RemoteFile, Url
from .requirements import CommandRequirement, EnvRequirement, Requirement, requirement_from_dict
from .status import Reason, Status, Statuses, StatusKind

__all__ = [
    "Checklist",
    "CHECK_TYPES",
    "Check",
    "CheckType",
    "CommandCheck",
    "Condition",
    "DirectoryCheck",
    "FileCheck",
    "HttpCheck",
    "HttpMethod",
    "VarCheck",
    "check_type_from_dict",
    "CommandValue",
    "EnvValue",
    "Fact",
    "FactSource",
    "LiteralValue",
    "RemoteFile",
    "Url",
    "CommandRequirement",
    "EnvRequirement",
    "Requirement",
    "requirement_from_dict",
    "Reason",
    "Status",
    "Statuses",
    "StatusKind",
]
