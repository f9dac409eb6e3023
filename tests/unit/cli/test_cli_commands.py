from __future__ import annotations

import argparse
import json
from pathlib import Path

import pytest

from checklints import __version__
from checklints.cli import settings_overrides
from checklints.cli._dispatcher import build_parser, discover_root_commands, main
from checklints.core.hashing import hash_bytes
from helpers import remote as fake_remote
from helpers.checklists import write_checklist, write_project_checklist, write_text

CHECKS = """
[[check]]
type = "file"
path = "README.md"
contains = ["hello"]
description = "Readme says hello"
"""


def test_commands_are_discovered() -> None:
    assert {"run", "init", "hash", "gc"} <= set(discover_root_commands())


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["--version"])
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 0
    assert "checklints" in capsys.readouterr().out


def test_absent_flags_do_not_override_config() -> None:
    parser = build_parser()
    args = parser.parse_args(["run", "--fail-fast", "--no-user-checklists"])

    overrides = settings_overrides(args)

    assert overrides["fail_fast"] is True
    assert overrides["no_cache"] is None
    assert overrides["external_checklists"] is None
    assert overrides["user_checklists"] is False
    assert "user_checklists" not in settings_overrides(argparse.Namespace())


def test_run_passes_and_bootstraps_user_config(isolated_env, capsys) -> None:
    write_project_checklist(isolated_env.project, CHECKS)
    write_text(isolated_env.project / "README.md", "hello\n")

    code = main(["run", str(isolated_env.project)])

    out = capsys.readouterr().out
    assert code == 0
    assert "> Checklist 'main.toml'" in out
    assert "    [PASS] Readme says hello" in out
    assert (isolated_env.config_dir / "config.yaml").is_file()
    assert isolated_env.user_checklists.is_dir()

    assert main(["run", str(isolated_env.project)]) == 0
    assert "[PASS] Readme says hello (cached)" in capsys.readouterr().out


def test_run_failure_exit_code_and_reason(isolated_env, capsys) -> None:
    write_project_checklist(isolated_env.project, CHECKS)

    code = main(["run", str(isolated_env.project)])

    out = capsys.readouterr().out
    assert code == 1
    assert "    [FAIL] Readme says hello" in out
    assert "          - Path is not a valid file:" in out


def test_run_json_output(isolated_env, capsys) -> None:
    write_project_checklist(isolated_env.project, CHECKS)
    write_text(isolated_env.project / "README.md", "hello\n")

    code = main(["run", str(isolated_env.project), "--json", "--no-cache"])

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["exit_code"] == 0
    assert payload["summary"]["pass"] == 1
    checks = next(iter(payload["checklists"].values()))
    assert checks["Readme says hello"]["status"] == "pass"
    assert not (isolated_env.cache_dir / "project").exists()


def test_run_with_explicit_checklist(isolated_env, tmp_path: Path, capsys) -> None:
    extra = write_checklist(tmp_path / "shared", "shared", CHECKS)
    write_text(isolated_env.project / "README.md", "hello\n")

    code = main(["run", str(isolated_env.project), "--check", str(extra)])

    assert code == 0
    assert "> Checklist 'shared.toml'" in capsys.readouterr().out


def test_run_without_checklists(isolated_env, capsys) -> None:
    assert main(["run", str(isolated_env.project)]) == 0
    assert "No checks found" in capsys.readouterr().out


def test_run_missing_project_dir(isolated_env, tmp_path: Path, capsys) -> None:
    assert main(["run", str(tmp_path / "nope")]) == 1
    assert "Project directory does not exist" in capsys.readouterr().err


def test_run_invalid_checklist_is_reported(isolated_env, capsys) -> None:
    write_project_checklist(isolated_env.project, '[[check]]\ntype = "file"\n')

    assert main(["run", str(isolated_env.project), "--json"]) == 1

    payload = json.loads(capsys.readouterr().err)
    assert payload["error"]["code"] == "ChecklistError"


def test_run_user_checklists_can_be_disabled(isolated_env, capsys) -> None:
    write_checklist(isolated_env.user_checklists, "user", CHECKS)

    assert main(["run", str(isolated_env.project)]) == 1
    capsys.readouterr()

    assert main(["run", str(isolated_env.project), "--no-user-checklists"]) == 0
    assert "No checks found" in capsys.readouterr().out


def test_init_command(isolated_env, capsys) -> None:
    assert main(["init", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert str(isolated_env.config_dir / "config.yaml") in payload["created"]

    assert main(["init"]) == 0
    assert "Already initialized" in capsys.readouterr().out


def test_hash_local_file(tmp_path: Path, capsys) -> None:
    path = write_text(tmp_path / "base.toml", "")
    assert main(["hash", str(path)]) == 0
    assert capsys.readouterr().out.strip() == hash_bytes(b"")

    assert main(["hash", str(tmp_path / "missing.toml")]) == 1


def test_hash_remote_reference(monkeypatch, capsys) -> None:
    url = "https://example.com/base.toml"
    fake_remote.install(monkeypatch, {url: b"x"})

    assert main(["hash", url]) == 0
    assert capsys.readouterr().out.strip() == f"{url}::{hash_bytes(b'x')}"


def test_gc_command(isolated_env, capsys) -> None:
    checklist = write_project_checklist(isolated_env.project, CHECKS)
    write_text(isolated_env.project / "README.md", "hello\n")
    main(["run", str(isolated_env.project)])
    checklist.write_text("", encoding="utf-8")
    capsys.readouterr()

    assert main(["gc", str(isolated_env.project), "--dry-run", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["dry_run"] is True
    assert payload["removed_paths"] == ["README.md"]

    assert main(["gc", str(isolated_env.project)]) == 0
    assert "Removed 1 path entries and 1 cached results" in capsys.readouterr().out
