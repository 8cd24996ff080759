"""Tests for the external renderer invocation."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List

import pytest

from gopuml.postproc.render import RenderCommand, parse_command


def test_parse_command_accepts_strings_and_lists() -> None:
    assert parse_command("java -jar 'my dir/plantuml.jar' -tsvg") == [
        "java",
        "-jar",
        "my dir/plantuml.jar",
        "-tsvg",
    ]
    assert parse_command(["plantuml", "-tpng"]) == ["plantuml", "-tpng"]
    assert parse_command(None) == []


def test_empty_command_is_rejected() -> None:
    with pytest.raises(ValueError):
        RenderCommand("   ")


def test_document_path_is_appended(tmp_path: Path) -> None:
    calls: List[List[str]] = []

    def runner(args: List[str]) -> subprocess.CompletedProcess[str]:
        calls.append(args)
        return subprocess.CompletedProcess(args, 0, stdout="rendered\n", stderr="")

    document = tmp_path / "puml.txt"
    result = RenderCommand("plantuml -tsvg", runner=runner).run(document)

    assert calls == [["plantuml", "-tsvg", str(document)]]
    assert result.ok
    assert result.output == "rendered\n"
    assert result.finished_at >= result.started_at


def test_failures_are_reported_not_raised(tmp_path: Path) -> None:
    def failing(args: List[str]) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(args, 3, stdout="", stderr="bad syntax")

    def missing(args: List[str]) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError(2, "No such file or directory", args[0])

    failed = RenderCommand(["plantuml"], runner=failing).run(tmp_path / "puml.txt")
    absent = RenderCommand(["plantuml"], runner=missing).run(tmp_path / "puml.txt")

    assert not failed.ok
    assert failed.returncode == 3
    assert failed.error == "bad syntax"
    assert absent.returncode is None
    assert "No such file" in absent.error
