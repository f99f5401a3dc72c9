"""CLI for the todo scheduler.

Computes schedules for task snapshot files and answers dependency
questions about them.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import date, datetime

import click

from .cli_init import init_command
from .cli_validate import validate
from .critical_path import critical_edges
from .cycle_detector import would_create_cycle
from .dep_graph import build_task_index, related_task_ids
from .exceptions import SnapshotLoadError
from .models import ScheduleResult, Task
from .project_config import OUTPUT_FORMATS, ProjectConfig, resolve_config_for_cli
from .scheduler import recompute_schedule
from .task_loader import LoadResult, dump_schedule, load_tasks

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """Todo Scheduler - dependency-aware start dates and critical paths."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


cli.add_command(init_command)
cli.add_command(validate)


def _load_config() -> ProjectConfig | None:
    try:
        return resolve_config_for_cli()
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _load_snapshot(tasks_file: str, config: ProjectConfig | None) -> LoadResult:
    default_duration = config.schedule.default_duration if config else 1
    try:
        return load_tasks(tasks_file, default_duration=default_duration)
    except SnapshotLoadError as exc:
        click.echo(f"Error: {exc}", err=True)
        for err in exc.errors:
            click.echo(f"  - {err}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("tasks_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Schedule start date (default: from config or the current date)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format (default: from config or table)",
)
def schedule(tasks_file: str, today: datetime | None, output_format: str | None) -> None:
    """Compute earliest start dates and the critical path."""
    config = _load_config()
    loaded = _load_snapshot(tasks_file, config)

    # Resolve start date: CLI > config > current date
    if today is not None:
        start_day = today.date()
    elif config and config.schedule.start_date:
        start_day = config.schedule.start_date
    else:
        start_day = date.today()

    resolved_format = output_format or (config.output.format if config else "table")

    result = recompute_schedule(loaded.tasks, start_day)

    if resolved_format == "json":
        click.echo(json.dumps(dump_schedule(loaded.tasks, result, start_day), indent=2))
        return

    _print_table(loaded.tasks, result, start_day)


def _print_table(tasks: list[Task], result: ScheduleResult, today: date) -> None:
    """Print the schedule ordered by earliest start."""
    ordered = sorted(tasks, key=lambda t: (result.earliest_starts[t.id], t.id))

    click.echo(f"{'ID':>5}  {'START':<10}  {'DAYS':>4}  {'CP':<2}  TITLE")
    for task in ordered:
        marker = "*" if task.id in result.critical_path else ""
        overdue = " (overdue)" if task.is_overdue(today) else ""
        click.echo(
            f"{task.id:>5}  {result.earliest_starts[task.id].isoformat():<10}  "
            f"{task.duration:>4}  {marker:<2}  {task.title}{overdue}"
        )

    click.echo("")
    finish = result.project_finish.isoformat() if result.project_finish else "-"
    click.echo(f"Project finish: {finish}")
    click.echo(f"Critical path length: {result.critical_length} days")
    edges = critical_edges(tasks, result.critical_path)
    if edges:
        click.echo("Critical edges: " + ", ".join(f"{a} -> {b}" for a, b in edges))


@cli.command("check-cycle")
@click.argument("tasks_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("task_id", type=int)
@click.argument("dependency_id", type=int)
def check_cycle(tasks_file: str, task_id: int, dependency_id: int) -> None:
    """Check whether TASK_ID may depend on DEPENDENCY_ID.

    Exits with status 1 if the new edge would create a cycle.
    """
    loaded = _load_snapshot(tasks_file, _load_config())

    if would_create_cycle(task_id, dependency_id, loaded.tasks):
        click.echo(
            f"Cycle: task {task_id} cannot depend on task {dependency_id}", err=True
        )
        sys.exit(1)

    click.echo(f"OK: task {task_id} can depend on task {dependency_id}")


@cli.command()
@click.argument("tasks_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("task_id", type=int)
def related(tasks_file: str, task_id: int) -> None:
    """List every task connected to TASK_ID through dependencies."""
    loaded = _load_snapshot(tasks_file, _load_config())
    index = build_task_index(loaded.tasks)
    if task_id not in index:
        click.echo(f"Error: Task {task_id} not found", err=True)
        sys.exit(1)

    for related_id in sorted(related_task_ids(task_id, loaded.tasks)):
        task = index.get(related_id)
        title = task.title if task else "(missing)"
        click.echo(f"{related_id:>5}  {title}")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
