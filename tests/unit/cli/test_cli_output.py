from __future__ import annotations

import json
from pathlib import Path

import pytest

from checklints.cli import OutputFormatter, format_statuses, summarize
from checklints.core.exceptions import ConfigError
from checklints.core.models import Status, Statuses


def sample_statuses() -> Statuses:
    statuses = Statuses()
    statuses.insert(Path("/p/.checklists/rust.toml"), "Readme", Status.passed().as_cached())
    statuses.insert(Path("/p/.checklists/rust.toml"), "License", Status.fail("Contents differ", "-a\n+b"))
    statuses.insert(Path("/p/checklist.toml"), "Home", Status.not_implemented("Check type 'varset' is not implemented"))
    statuses.insert(Path("/p/checklist.toml"), "Lock", Status.skip("Condition not met: Rust"))
    return statuses


def test_text_report_layout() -> None:
    assert format_statuses(sample_statuses()) == "\n".join(
        [
            "> Checklist 'rust.toml'",
            "    [PASS] Readme (cached)",
            "    [FAIL] License",
            "          - Contents differ:",
            "-a",
            "+b",
            "",
            "> Checklist 'checklist.toml'",
            "    [TODO] Home",
            "          - Check type 'varset' is not implemented",
            "    [SKIP] Lock",
            "          - Condition not met: Rust",
        ]
    )


def test_summary_counts_every_kind() -> None:
    assert summarize(sample_statuses()) == {
        "pass": 1,
        "skip": 1,
        "fail": 1,
        "not-implemented": 1,
        "total": 4,
    }


def test_json_error_goes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    OutputFormatter(json_mode=True).error(ConfigError("bad", context={"path": "x"}))

    captured = capsys.readouterr()
    assert captured.out == ""
    payload = json.loads(captured.err)
    assert payload["error"]["code"] == "ConfigError"
    assert payload["error"]["context"] == {"path": "x"}


def test_text_error(capsys: pytest.CaptureFixture[str]) -> None:
    OutputFormatter().error("boom")
    assert capsys.readouterr().err == "Error: boom\n"


def test_success_modes(capsys: pytest.CaptureFixture[str]) -> None:
    OutputFormatter().success({"a": 1}, "done")
    assert capsys.readouterr().out == "done\n"

    OutputFormatter(json_mode=True).success({"a": 1}, "done")
    assert json.loads(capsys.readouterr().out) == {"status": "success", "a": 1}
