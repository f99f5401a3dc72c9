"""Graph accessor for todo scheduler tasks.

Decodes each task's stored dependency list, resolves ids against the
current collection, and provides the shared traversal used by the
earliest-start and critical-path calculators.

Every function here is total: a corrupt dependency encoding decodes to
an empty list and a dangling reference is simply not an edge.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from .models import Task

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class DanglingReference:
    """A task whose declared dependencies include ids not in the collection."""

    task_id: int
    missing_ids: tuple[int, ...]


def parse_dependency_ids(raw: Any) -> list[int]:
    """Parse a stored dependency value into a list of task ids.

    Handles ``None``, empty string, ``"null"``, ``"[]"``, JSON arrays and
    already-decoded lists. Returns an empty list for any value that is not
    an array made up solely of integers.

    Args:
        raw: The stored ``dependency_ids`` value.

    Returns:
        List of dependency task ids, in declared order.
    """
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        parsed: Any = raw
    else:
        text = str(raw).strip()
        if not text or text in ("null", "[]"):
            return []
        try:
            parsed = json.loads(text)
        except (ValueError, RecursionError):
            return []
    if not isinstance(parsed, (list, tuple)):
        return []
    if not all(isinstance(item, int) and not isinstance(item, bool) for item in parsed):
        return []
    return list(parsed)


def dependencies_of(task: Task) -> list[int]:
    """Return the declared dependency ids of *task*."""
    return parse_dependency_ids(task.dependency_ids)


def encode_dependency_ids(ids: Iterable[int]) -> str:
    """Encode dependency ids in the storage format (a JSON array)."""
    return json.dumps([int(i) for i in ids])


def build_task_index(tasks: Iterable[Task]) -> dict[int, Task]:
    """Map task id to task. The first task seen with a given id wins."""
    index: dict[int, Task] = {}
    for task in tasks:
        index.setdefault(task.id, task)
    return index


def resolved_dependencies(task: Task, index: Mapping[int, Task]) -> list[int]:
    """Declared dependency ids of *task* that exist in *index*, in order."""
    return [dep_id for dep_id in dependencies_of(task) if dep_id in index]


def dependents_of(task_id: int, tasks: Iterable[Task]) -> list[int]:
    """Ids of tasks that declare *task_id* as a dependency."""
    return [t.id for t in tasks if task_id in dependencies_of(t)]


def related_task_ids(task_id: int, tasks: Sequence[Task]) -> set[int]:
    """Collect every task connected to *task_id* upstream or downstream.

    The starting task is always included, even if it is not in *tasks*.
    """
    index = build_task_index(tasks)
    downstream: dict[int, list[int]] = {tid: [] for tid in index}
    for task in index.values():
        for dep_id in resolved_dependencies(task, index):
            downstream[dep_id].append(task.id)

    related: set[int] = set()
    stack = [task_id]
    while stack:
        current = stack.pop()
        if current in related:
            continue
        related.add(current)
        task = index.get(current)
        if task is None:
            continue
        stack.extend(resolved_dependencies(task, index))
        stack.extend(downstream[current])
    return related


def find_dangling_dependencies(tasks: Sequence[Task]) -> list[DanglingReference]:
    """Detect dependency ids that do not match any task in the collection.

    The calculators already ignore such references; this is a diagnostic
    for callers that want to clean them up.

    Args:
        tasks: The full task collection.

    Returns:
        One entry per task with at least one dangling reference. An empty
        list means every declared dependency resolves.
    """
    index = build_task_index(tasks)
    issues: list[DanglingReference] = []
    for task in index.values():
        missing = tuple(d for d in dependencies_of(task) if d not in index)
        if missing:
            issues.append(DanglingReference(task_id=task.id, missing_ids=missing))
    return issues


def fold_dependencies(
    root_id: int,
    index: Mapping[int, Task],
    memo: dict[int, T],
    *,
    baseline: T,
    contribute: Callable[[Task, T], T],
    combine: Callable[[Task, list[T]], T],
) -> T:
    """Evaluate a value for *root_id* from the values of its dependencies.

    Post-order walk over resolved dependency edges using an explicit
    stack. Finished values are cached in *memo* across calls. A dependency
    that is already on the current path (a cycle) is not entered again;
    it contributes ``contribute(dep, baseline)`` instead.

    Args:
        root_id: Task to evaluate. Must be present in *index*.
        index: Task lookup by id.
        memo: Shared cache of finished values, updated in place.
        baseline: Value assumed for a dependency reached through a cycle.
        contribute: Maps a dependency and its value to what it adds to
            the dependent task.
        combine: Folds a task and its dependencies' contributions into
            the task's own value.

    Returns:
        The value for *root_id*.
    """
    if root_id in memo:
        return memo[root_id]

    root = index[root_id]
    frames: list[tuple[Task, Iterator[int], list[T]]] = [
        (root, iter(resolved_dependencies(root, index)), [])
    ]
    on_path = {root_id}

    while frames:
        task, pending, gathered = frames[-1]
        descended = False
        for dep_id in pending:
            dep = index[dep_id]
            if dep_id in memo:
                gathered.append(contribute(dep, memo[dep_id]))
            elif dep_id in on_path:
                logger.warning(
                    "Dependency cycle through task %d reached from task %d",
                    dep_id,
                    task.id,
                )
                gathered.append(contribute(dep, baseline))
            else:
                frames.append((dep, iter(resolved_dependencies(dep, index)), []))
                on_path.add(dep_id)
                descended = True
                break
        if descended:
            continue

        frames.pop()
        on_path.discard(task.id)
        value = combine(task, gathered)
        memo[task.id] = value
        if frames:
            frames[-1][2].append(contribute(task, value))

    return memo[root_id]


def dependency_levels(tasks: Sequence[Task]) -> dict[int, int]:
    """Depth of each task in the dependency graph.

    Tasks without resolvable dependencies sit at level 0; every other task
    sits one level below its deepest dependency.
    """
    index = build_task_index(tasks)
    levels: dict[int, int] = {}
    for task_id in index:
        fold_dependencies(
            task_id,
            index,
            levels,
            baseline=0,
            contribute=lambda _dep, level: level,
            combine=lambda _task, deps: max(deps) + 1 if deps else 0,
        )
    return levels
