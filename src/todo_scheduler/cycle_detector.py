"""Circular dependency detection for todo tasks.

``would_create_cycle`` guards a single edge before it is committed.
``find_cycles`` audits a whole collection, for snapshots that were built
without going through the guard (imported files, stale data).
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence

from .dep_graph import build_task_index, dependencies_of, resolved_dependencies
from .models import Task

logger = logging.getLogger(__name__)


def would_create_cycle(
    candidate_id: int,
    proposed_dependency_id: int,
    tasks: Sequence[Task],
) -> bool:
    """Check whether making *candidate_id* depend on *proposed_dependency_id*
    would close a dependency loop.

    Walks dependency edges forward from the proposed dependency. Reaching
    the candidate means the candidate is already a (transitive) dependency
    of the proposed one. The edge under test is never written anywhere;
    starting the search at the proposed dependency models it.

    Args:
        candidate_id: The task that would gain the dependency.
        proposed_dependency_id: The task it would depend on.
        tasks: The full current task collection.

    Returns:
        True if the edge would create a cycle. Ids missing from the
        collection are dead ends.
    """
    index = build_task_index(tasks)
    visited: set[int] = set()
    stack = [proposed_dependency_id]

    while stack:
        current = stack.pop()
        if current == candidate_id:
            logger.debug(
                "Edge %d -> %d would create a cycle", candidate_id, proposed_dependency_id
            )
            return True
        if current in visited:
            continue
        visited.add(current)

        task = index.get(current)
        if task is None:
            continue
        # Reversed so the first declared dependency is explored first.
        stack.extend(reversed(dependencies_of(task)))

    return False


def find_cycles(tasks: Sequence[Task]) -> list[str]:
    """Find circular dependencies already present in a task collection.

    Uses Kahn's algorithm (BFS topological sort). If any nodes remain after
    processing all zero-in-degree nodes, cycles exist.

    Args:
        tasks: Task collection with dependency ids populated.

    Returns:
        List of strings describing detected cycles, e.g. ``"1 -> 2 -> 1"``.
        Empty if the graph is acyclic.
    """
    if not tasks:
        return []

    index = build_task_index(tasks)

    # Edge: dep -> task.id (dep must finish before task starts)
    adj: dict[int, list[int]] = {tid: [] for tid in index}
    in_degree: dict[int, int] = {tid: 0 for tid in index}

    for task in index.values():
        for dep_id in resolved_dependencies(task, index):
            adj[dep_id].append(task.id)
            in_degree[task.id] += 1

    queue: deque[int] = deque(tid for tid, degree in in_degree.items() if degree == 0)

    visited_count = 0
    while queue:
        node = queue.popleft()
        visited_count += 1
        for neighbor in adj[node]:
            in_degree[neighbor] -= 1
            if in_degree[neighbor] == 0:
                queue.append(neighbor)

    if visited_count == len(index):
        return []

    remaining = {tid for tid, degree in in_degree.items() if degree > 0}
    return _trace_cycles(adj, remaining)


def _trace_cycles(adj: dict[int, list[int]], remaining: set[int]) -> list[str]:
    """Trace cycles among the nodes Kahn's algorithm could not remove.

    Args:
        adj: Adjacency list for the full graph.
        remaining: Node ids known to be in or behind a cycle.

    Returns:
        List of formatted cycle strings, one per detected cycle.
    """
    errors: list[str] = []
    visited: set[int] = set()

    for start in sorted(remaining):
        if start in visited:
            continue

        path: list[int] = []
        path_set: set[int] = set()
        node: int | None = start

        # Follow any edge into another remaining node until a node repeats
        while node is not None and node not in path_set:
            if node not in remaining or node in visited:
                node = None
                break
            path.append(node)
            path_set.add(node)
            node = next((n for n in adj[node] if n in remaining), None)

        visited.update(path)
        if node is not None:
            cycle = path[path.index(node):]
            cycle.append(node)
            errors.append(" -> ".join(str(n) for n in cycle))

    return errors
