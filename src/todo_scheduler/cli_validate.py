"""Validate CLI command for the todo scheduler.

Reports dangling dependency references and circular dependencies in a
task snapshot without computing a schedule.
"""

from __future__ import annotations

import sys

import click

from .cycle_detector import find_cycles
from .dep_graph import find_dangling_dependencies
from .exceptions import SnapshotLoadError
from .task_loader import load_tasks


@click.command("validate")
@click.argument("tasks_file", type=click.Path(exists=True, dir_okay=False))
def validate(tasks_file: str) -> None:
    """Check a task file for dangling references and cycles.

    Exits with status 1 if the dependency graph contains a cycle.
    Dangling references are reported but tolerated.
    """
    try:
        loaded = load_tasks(tasks_file)
    except SnapshotLoadError as exc:
        click.echo(f"Error: {exc}", err=True)
        for err in exc.errors:
            click.echo(f"  - {err}", err=True)
        sys.exit(1)

    dangling = find_dangling_dependencies(loaded.tasks)
    cycles = find_cycles(loaded.tasks)

    if dangling:
        click.echo("Dangling dependencies (ignored when scheduling):")
        for issue in dangling:
            missing = ", ".join(str(m) for m in issue.missing_ids)
            click.echo(f"  - task {issue.task_id}: {missing}")

    if cycles:
        click.echo("Circular dependencies:")
        for cycle in cycles:
            click.echo(f"  - {cycle}")
        sys.exit(1)

    click.echo(f"OK: {len(loaded.tasks)} tasks, no circular dependencies")
