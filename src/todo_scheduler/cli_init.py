"""CLI init command for the todo scheduler.

Provides the top-level `init` command that bootstraps a .todo/ directory
with config.toml.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from .project_config import create_default_config


@click.command("init")
@click.option(
    "--project",
    "-p",
    "project_path",
    required=True,
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Path to the project directory",
)
@click.option(
    "--name",
    "-n",
    default=None,
    help="Project name (defaults to directory name)",
)
@click.option(
    "--force",
    is_flag=True,
    help="Overwrite existing .todo/ configuration",
)
def init_command(project_path: str, name: str | None, force: bool) -> None:
    """Initialize a project for task scheduling.

    Creates a .todo/ directory with config.toml.
    """
    path = Path(project_path)

    try:
        config = create_default_config(path, name=name, force=force)
    except FileExistsError:
        click.echo(
            f"Error: Project already initialized at {path / '.todo'}. "
            "Use --force to overwrite.",
            err=True,
        )
        sys.exit(1)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Initialized todo project '{config.name}' at {path}")
    click.echo(f"  Config: {path / '.todo' / 'config.toml'}")
    click.echo("")
    click.echo("Next steps:")
    click.echo("  todo-scheduler schedule <tasks.json>")
