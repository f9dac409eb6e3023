from __future__ import annotations

from checklints.core.diff import line_diff


def test_equal_after_trimming_is_no_diff() -> None:
    assert line_diff("hello\n", "hello") is None
    assert line_diff("  a\nb  ", "a\nb") is None


def test_diff_is_unified_and_labelled() -> None:
    diff = line_diff("a\nb\nc", "a\nB\nc")

    assert diff is not None
    lines = diff.splitlines()
    assert lines[0] == "--- expected"
    assert lines[1] == "+++ actual"
    assert "-b" in lines
    assert "+B" in lines
