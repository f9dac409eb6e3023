from __future__ import annotations

from pathlib import Path

import pytest

from checklints.core.exceptions import ChecklistError
from checklints.core.models import (
    Checklist,
    CommandValue,
    EnvValue,
    FileCheck,
    LiteralValue,
)
from helpers.checklists import write_checklist


def test_load_parses_facts_checks_and_templates(tmp_path: Path) -> None:
    path = write_checklist(
        tmp_path,
        "rust",
        """
        [[fact]]
        key = "author"
        type = "literal"
        value = "Jane"

        [[fact]]
        key = "HOME"
        type = "env-var"

        [[fact]]
        key = "branch"
        type = "eval-command"
        command = "git rev-parse --abbrev-ref HEAD"
        requires = [{ type = "command", command = "git" }]

        [[check]]
        type = "file"
        path = "LICENSE"
        template = "templates/LICENSE.j2"

        [[check]]
        type = "directory"
        path = "src"
        description = "Sources"
        """,
    )

    checklist = Checklist.load(path)

    assert checklist.path == path
    assert [f.key for f in checklist.facts] == ["author", "HOME", "branch"]
    assert checklist.facts[0].source == LiteralValue("Jane")
    assert checklist.facts[1].source == EnvValue("HOME")
    assert isinstance(checklist.facts[2].source, CommandValue)
    assert len(checklist.facts[2].requirements) == 1
    assert isinstance(checklist.checks[0].check, FileCheck)
    assert checklist.checks[1].label == "Sources"
    assert checklist.templates() == [tmp_path / "templates" / "LICENSE.j2"]


def test_env_var_fact_reads_var_when_given(tmp_path: Path) -> None:
    path = write_checklist(
        tmp_path,
        "env",
        """
        [[fact]]
        key = "user"
        type = "env-var"
        var = "USER"
        """,
    )
    assert Checklist.load(path).facts[0].source == EnvValue("USER")


def test_empty_checklist_is_valid(tmp_path: Path) -> None:
    checklist = Checklist.load(write_checklist(tmp_path, "empty", ""))
    assert checklist.checks == ()
    assert checklist.facts == ()


def test_invalid_toml_raises_checklist_error(tmp_path: Path) -> None:
    path = write_checklist(tmp_path, "broken", "[[check]\ntype = ")
    with pytest.raises(ChecklistError, match="Invalid TOML") as exc:
        Checklist.load(path)
    assert exc.value.context["path"] == str(path)


@pytest.mark.parametrize(
    "body",
    [
        '[[check]]\ntype = "file"\n',
        '[[check]]\ntype = "socket"\npath = "x"\n',
        '[[fact]]\nkey = "a"\ntype = "eval-command"\n',
        '[[unknown]]\nkey = "a"\n',
    ],
)
def test_schema_violations_raise_checklist_error(tmp_path: Path, body: str) -> None:
    path = write_checklist(tmp_path, "bad", body)
    with pytest.raises(ChecklistError, match="Invalid checklist"):
        Checklist.load(path)


def test_missing_file_raises_checklist_error(tmp_path: Path) -> None:
    with pytest.raises(ChecklistError, match="Unable to read"):
        Checklist.load(tmp_path / "missing.toml")
