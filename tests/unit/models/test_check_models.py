from __future__ import annotations

import pytest

from checklints.core.models import (
    Check,
    CommandRequirement,
    DirectoryCheck,
    EnvRequirement,
    FileCheck,
    HttpMethod,
    VarCheck,
    check_type_from_dict,
)


def test_label_prefers_explicit_description() -> None:
    check = Check.from_dict({"type": "file", "path": "README.md", "description": "Readme"})
    assert check.label == "Readme"


def test_label_is_generated_from_variant() -> None:
    check = Check.from_dict({"type": "file", "path": "README.md", "contains": ["# Title"]})
    assert check.label == "File README.md: must exist, must contain ['# Title']"


def test_varset_description() -> None:
    assert VarCheck("HOME").describe() == "Var HOME must be set"
    assert VarCheck("MODE", "ci").describe() == "Var MODE must be set to ci"


def test_fingerprint_is_stable_and_sensitive_to_definition() -> None:
    data = {"type": "file", "path": "LICENSE", "contents": "MIT"}
    a = Check.from_dict(data)
    b = Check.from_dict(dict(data))
    c = Check.from_dict({**data, "contents": "Apache-2.0"})

    assert a.fingerprint() == b.fingerprint()
    assert a.fingerprint() != c.fingerprint()


def test_fingerprint_includes_conditions_and_requirements() -> None:
    base = {"type": "file", "path": "Cargo.toml"}
    plain = Check.from_dict(base)
    gated = Check.from_dict({**base, "conditions": [{"type": "file", "path": "src/main.rs"}]})
    required = Check.from_dict({**base, "requirements": [{"type": "command", "command": "cargo"}]})

    assert len({plain.fingerprint(), gated.fingerprint(), required.fingerprint()}) == 3
    assert required.requirements == (CommandRequirement("cargo"),)


def test_check_variants_from_dict() -> None:
    assert check_type_from_dict({"type": "directory", "path": "src", "contains": ["lib"]}) == (
        DirectoryCheck(path="src", contains=("lib",))
    )
    http = check_type_from_dict({"type": "http", "method": "Get", "url": "https://example.com"})
    assert http.method is HttpMethod.GET
    assert http.code == 200
    assert isinstance(check_type_from_dict({"type": "file", "path": "x"}), FileCheck)


def test_unknown_check_type_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown check type"):
        check_type_from_dict({"type": "socket"})


def test_env_requirement_from_check() -> None:
    check = Check.from_dict(
        {"type": "varset", "key": "CI", "requirements": [{"type": "env", "key": "HOME"}]}
    )
    assert check.requirements == (EnvRequirement("HOME"),)
