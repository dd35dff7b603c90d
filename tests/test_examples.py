"""Tests for the runnable examples."""

from __future__ import annotations

import io
import sys

import pytest

from examples import algorithms_example


def test_algorithms_example_prints_sorted_unique_values(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(sys, "argv", ["algorithms_example"])
    algorithms_example.main()
    out = capsys.readouterr().out
    assert "1\n2\n4\n6\n7\n9\n" in out


def test_algorithms_example_reads_lines_with_the_stdin_flag(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(sys, "argv", ["algorithms_example", "--stdin"])
    monkeypatch.setattr(sys, "stdin", io.StringIO("pear\napple\npear\n"))
    algorithms_example.main()
    assert capsys.readouterr().out.endswith("apple\npear\n")


def test_algorithms_example_rejects_unknown_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["algorithms_example", "--stdn"])
    with pytest.raises(SystemExit):
        algorithms_example.main()
