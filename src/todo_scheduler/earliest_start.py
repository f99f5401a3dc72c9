"""Earliest-start calculator.

Forward pass over the dependency graph: a task may start once every
dependency has finished, and a task with no resolvable dependencies may
start today. Dates are day-granular ``datetime.date`` values.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, timedelta

from .dep_graph import build_task_index, fold_dependencies
from .models import Task

logger = logging.getLogger(__name__)


def compute_earliest_starts(
    tasks: Sequence[Task],
    today: date | None = None,
) -> dict[int, date]:
    """Compute the earliest feasible start date of every task.

    ``start(T) = max(today, max(start(d) + duration(d) for d in deps(T)))``

    Dangling dependency ids are ignored. If a cycle is present anyway, a
    dependency reached again on the same path is treated as starting
    today, so the computation still terminates.

    Args:
        tasks: The full task collection.
        today: Date the computation runs for. Defaults to ``date.today()``.

    Returns:
        Mapping of task id to earliest start date, one entry per task.
    """
    start_day = today or date.today()
    index = build_task_index(tasks)
    starts: dict[int, date] = {}

    for task_id in index:
        fold_dependencies(
            task_id,
            index,
            starts,
            baseline=start_day,
            contribute=lambda dep, dep_start: dep_start + timedelta(days=dep.duration),
            combine=lambda _task, finishes: max([start_day, *finishes]),
        )

    logger.debug("Computed earliest starts for %d tasks from %s", len(starts), start_day)
    return starts


def compute_project_finish(
    tasks: Sequence[Task],
    earliest_starts: dict[int, date],
) -> date | None:
    """Latest finish date (earliest start + duration) across all tasks."""
    index = build_task_index(tasks)
    finishes = [
        start + timedelta(days=index[task_id].duration)
        for task_id, start in earliest_starts.items()
        if task_id in index
    ]
    return max(finishes, default=None)
