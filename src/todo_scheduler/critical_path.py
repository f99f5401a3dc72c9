"""Critical path tracer.

Finds the longest duration-weighted dependency chains in a task
collection and marks every task on them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .dep_graph import build_task_index, fold_dependencies, resolved_dependencies
from .models import Task

logger = logging.getLogger(__name__)


def compute_path_lengths(tasks: Sequence[Task]) -> dict[int, int]:
    """Length of the longest dependency chain ending at each task.

    A task with no resolvable dependencies has its own duration as path
    length; otherwise its duration plus the longest path among its
    dependencies. A dependency reached again on the same path (a cycle)
    contributes 0.
    """
    index = build_task_index(tasks)
    lengths: dict[int, int] = {}
    for task_id in index:
        fold_dependencies(
            task_id,
            index,
            lengths,
            baseline=0,
            contribute=lambda _dep, length: length,
            combine=lambda task, deps: task.duration + max(deps, default=0),
        )
    return lengths


def compute_critical_path(tasks: Sequence[Task]) -> set[int]:
    """Compute the set of task ids lying on a critical path.

    Every task whose path length equals the global maximum is an end
    task. From each end task the trace walks backwards, always following
    the dependency with the longest path (the first declared one on a
    tie), until it reaches a task without dependencies.

    Args:
        tasks: The full task collection.

    Returns:
        Ids of all tasks on any critical path. Empty only when *tasks*
        is empty.
    """
    index = build_task_index(tasks)
    lengths = compute_path_lengths(tasks)
    if not lengths:
        return set()

    longest = max(lengths.values())
    end_ids = [task_id for task_id, length in lengths.items() if length == longest]

    critical: set[int] = set()
    for end_id in end_ids:
        current = index[end_id]
        # A task already marked has had its chain traced; this also ends cycles.
        while current.id not in critical:
            critical.add(current.id)
            deps = resolved_dependencies(current, index)
            if not deps:
                break
            best = deps[0]
            for dep_id in deps[1:]:
                if lengths[dep_id] > lengths[best]:
                    best = dep_id
            current = index[best]

    logger.debug(
        "Critical path: %d of %d tasks, length %d", len(critical), len(index), longest
    )
    return critical


def critical_edges(
    tasks: Sequence[Task],
    critical: Iterable[int],
) -> list[tuple[int, int]]:
    """Dependency edges ``(dependency_id, task_id)`` with both ends critical."""
    marked = set(critical)
    index = build_task_index(tasks)
    return [
        (dep_id, task.id)
        for task in index.values()
        if task.id in marked
        for dep_id in resolved_dependencies(task, index)
        if dep_id in marked
    ]
