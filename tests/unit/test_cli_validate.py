"""Tests for the validate CLI command."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from todo_scheduler.cli_validate import validate


def _write(tmp_path: Path, payload: Any) -> str:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_validate_help(runner: CliRunner) -> None:
    result = runner.invoke(validate, ["--help"])
    assert result.exit_code == 0
    assert "dangling" in result.output.lower()


def test_clean_graph(runner: CliRunner, tmp_path: Path) -> None:
    path = _write(tmp_path, [{"id": 1, "title": "A"}, {"id": 2, "title": "B", "dependency_ids": [1]}])

    result = runner.invoke(validate, [path])

    assert result.exit_code == 0
    assert "OK: 2 tasks" in result.output


def test_dangling_references_reported_but_tolerated(runner: CliRunner, tmp_path: Path) -> None:
    path = _write(tmp_path, [{"id": 1, "title": "A", "dependency_ids": [8, 9]}])

    result = runner.invoke(validate, [path])

    assert result.exit_code == 0
    assert "task 1: 8, 9" in result.output


def test_cycle_fails(runner: CliRunner, tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        [
            {"id": 1, "title": "A", "dependency_ids": [3]},
            {"id": 2, "title": "B", "dependency_ids": [1]},
            {"id": 3, "title": "C", "dependency_ids": [2]},
        ],
    )

    result = runner.invoke(validate, [path])

    assert result.exit_code == 1
    assert "1 -> 2 -> 3 -> 1" in result.output


def test_invalid_records(runner: CliRunner, tmp_path: Path) -> None:
    path = _write(tmp_path, [{"id": 1}])

    result = runner.invoke(validate, [path])

    assert result.exit_code == 1
    assert "Validation failed" in result.output
    assert "title" in result.output
