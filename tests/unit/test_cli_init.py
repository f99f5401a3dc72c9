"""Tests for CLI init command.

Tests the `todo-scheduler init` command using Click's CliRunner
with tmp_path fixtures for isolated filesystem operations.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from todo_scheduler.cli import cli
from todo_scheduler.project_config import load_project_config


class TestInitCommand:
    """Tests for the init CLI command."""

    @pytest.fixture
    def runner(self) -> CliRunner:
        """Create a CliRunner for testing."""
        return CliRunner()

    def test_init_help(self, runner: CliRunner) -> None:
        """init --help shows help text."""
        result = runner.invoke(cli, ["init", "--help"])
        assert result.exit_code == 0
        assert "Initialize a project" in result.output
        assert "--project" in result.output
        assert "--name" in result.output
        assert "--force" in result.output

    def test_init_creates_config(self, runner: CliRunner, tmp_path: Path) -> None:
        """init --project creates .todo/config.toml."""
        result = runner.invoke(cli, ["init", "--project", str(tmp_path), "--name", "chores"])

        assert result.exit_code == 0
        assert (tmp_path / ".todo" / "config.toml").is_file()
        assert load_project_config(tmp_path).name == "chores"
        assert "Initialized todo project 'chores'" in result.output

    def test_init_twice_fails_without_force(self, runner: CliRunner, tmp_path: Path) -> None:
        runner.invoke(cli, ["init", "--project", str(tmp_path), "--name", "a"])

        result = runner.invoke(cli, ["init", "--project", str(tmp_path), "--name", "b"])

        assert result.exit_code == 1
        assert "already initialized" in result.output

    def test_init_force_overwrites(self, runner: CliRunner, tmp_path: Path) -> None:
        runner.invoke(cli, ["init", "--project", str(tmp_path), "--name", "a"])

        result = runner.invoke(
            cli, ["init", "--project", str(tmp_path), "--name", "b", "--force"]
        )

        assert result.exit_code == 0
        assert load_project_config(tmp_path).name == "b"

    def test_init_invalid_name(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["init", "--project", str(tmp_path), "--name", "two words"])

        assert result.exit_code == 1
        assert "whitespace" in result.output

    def test_init_requires_existing_directory(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["init", "--project", str(tmp_path / "missing")])

        assert result.exit_code != 0
