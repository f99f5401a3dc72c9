"""Schedule recomputation and an in-memory task list.

``recompute_schedule`` is the single entry point that refreshes the
derived fields of a collection. It always works over the whole
collection; derived fields are never patched incrementally.

``TaskList`` enforces the task lifecycle around it: input is validated
when a task is created or edited, edges that would close a cycle are
rejected, deleting a task removes it from every dependency list, and
every mutation ends with a full recompute.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from datetime import date

from pydantic import ValidationError

from .critical_path import compute_critical_path, compute_path_lengths
from .cycle_detector import would_create_cycle
from .dep_graph import build_task_index, dependencies_of, encode_dependency_ids
from .earliest_start import compute_earliest_starts, compute_project_finish
from .exceptions import DependencyCycleError, InvalidTaskError, TaskNotFoundError
from .models import ScheduleResult, Task
from .schemas import TaskCreateRequest

logger = logging.getLogger(__name__)


def recompute_schedule(tasks: Sequence[Task], today: date | None = None) -> ScheduleResult:
    """Recompute earliest starts and the critical path for every task.

    Writes ``earliest_start`` and ``is_on_critical_path`` back onto each
    task in *tasks*.

    Args:
        tasks: The full task collection.
        today: Date the schedule starts from. Defaults to ``date.today()``.

    Returns:
        ScheduleResult with the computed mappings.
    """
    earliest_starts = compute_earliest_starts(tasks, today)
    critical = compute_critical_path(tasks)

    for task in tasks:
        task.earliest_start = earliest_starts.get(task.id)
        task.is_on_critical_path = task.id in critical

    result = ScheduleResult(
        earliest_starts=earliest_starts,
        critical_path=frozenset(critical),
        path_lengths=compute_path_lengths(tasks),
        project_finish=compute_project_finish(tasks, earliest_starts),
    )
    logger.info(
        "Recomputed schedule: %d tasks, %d on critical path, finish %s",
        len(earliest_starts),
        len(critical),
        result.project_finish,
    )
    return result


class TaskList:
    """In-memory task collection with dependency-aware scheduling.

    Args:
        tasks: Initial tasks. They are taken as-is; use the snapshot
            loader to validate external data first.
        today: Fixed schedule start date. When omitted, ``clock`` is
            consulted on every recompute.
        clock: Callable returning today's date.
    """

    def __init__(
        self,
        tasks: Iterable[Task] | None = None,
        *,
        today: date | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._tasks: list[Task] = list(tasks or [])
        self._today = today
        self._clock = clock
        self._next_id = max((t.id for t in self._tasks), default=0) + 1
        self._schedule = self.recompute()

    @property
    def tasks(self) -> list[Task]:
        """Snapshot of the current tasks, in insertion order."""
        return list(self._tasks)

    @property
    def schedule(self) -> ScheduleResult:
        """Result of the most recent recompute."""
        return self._schedule

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def __contains__(self, task_id: object) -> bool:
        return any(t.id == task_id for t in self._tasks)

    def get(self, task_id: int) -> Task:
        """Return the task with *task_id*.

        Raises:
            TaskNotFoundError: If no such task exists.
        """
        task = build_task_index(self._tasks).get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def recompute(self) -> ScheduleResult:
        """Recompute the whole schedule and store the result."""
        today = self._today or self._clock()
        self._schedule = recompute_schedule(self._tasks, today)
        return self._schedule

    def add_task(
        self,
        title: str,
        duration: int = 1,
        dependency_ids: Iterable[int] = (),
        due_date: date | None = None,
    ) -> Task:
        """Create a task, assign it the next id and recompute.

        Raises:
            InvalidTaskError: On a blank title or a non-positive duration.
            TaskNotFoundError: If a dependency id does not exist.
            DependencyCycleError: If a dangling reference to the new id
                would turn one of the dependencies into a cycle.
        """
        try:
            request = TaskCreateRequest(
                title=title,
                duration=duration,
                dependency_ids=list(dependency_ids),
                due_date=due_date,
            )
        except ValidationError as exc:
            raise InvalidTaskError(str(exc)) from exc

        task_id = self._next_id
        deps = list(dict.fromkeys(request.dependency_ids))
        for dep_id in deps:
            self.get(dep_id)
            if would_create_cycle(task_id, dep_id, self._tasks):
                raise DependencyCycleError(task_id, dep_id)

        task = Task(
            id=task_id,
            title=request.title,
            duration=request.duration,
            dependency_ids=encode_dependency_ids(deps),
            due_date=request.due_date,
        )
        self._tasks.append(task)
        self._next_id += 1
        logger.info("Added task %d: %s", task.id, task.title)
        self.recompute()
        return task

    def check_dependency(self, task_id: int, dependency_id: int) -> bool:
        """Return True if *task_id* may depend on *dependency_id*.

        Does not modify anything.
        """
        return not would_create_cycle(task_id, dependency_id, self._tasks)

    def add_dependency(self, task_id: int, dependency_id: int) -> Task:
        """Make *task_id* depend on *dependency_id* and recompute.

        Adding an edge that already exists is a no-op.

        Raises:
            TaskNotFoundError: If either task does not exist.
            InvalidTaskError: If the task would depend on itself.
            DependencyCycleError: If the edge would close a cycle.
        """
        task = self.get(task_id)
        self.get(dependency_id)
        if task_id == dependency_id:
            raise InvalidTaskError(f"Task {task_id} cannot depend on itself")

        deps = dependencies_of(task)
        if dependency_id in deps:
            return task
        if would_create_cycle(task_id, dependency_id, self._tasks):
            raise DependencyCycleError(task_id, dependency_id)

        task.dependency_ids = encode_dependency_ids([*deps, dependency_id])
        logger.info("Task %d now depends on task %d", task_id, dependency_id)
        self.recompute()
        return task

    def remove_dependency(self, task_id: int, dependency_id: int) -> Task:
        """Drop the edge from *task_id* to *dependency_id* and recompute.

        Raises:
            TaskNotFoundError: If *task_id* does not exist.
        """
        task = self.get(task_id)
        deps = dependencies_of(task)
        if dependency_id in deps:
            task.dependency_ids = encode_dependency_ids(d for d in deps if d != dependency_id)
            logger.info("Task %d no longer depends on task %d", task_id, dependency_id)
            self.recompute()
        return task

    def set_duration(self, task_id: int, duration: int) -> Task:
        """Change the duration of *task_id* and recompute.

        Raises:
            TaskNotFoundError: If the task does not exist.
            InvalidTaskError: If *duration* is not a positive integer.
        """
        task = self.get(task_id)
        if isinstance(duration, bool) or not isinstance(duration, int) or duration < 1:
            raise InvalidTaskError(f"duration must be a positive integer, got {duration!r}")
        task.duration = duration
        self.recompute()
        return task

    def remove_task(self, task_id: int) -> Task:
        """Delete *task_id*, strip it from all dependency lists and recompute.

        Raises:
            TaskNotFoundError: If the task does not exist.
        """
        task = self.get(task_id)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        for other in self._tasks:
            deps = dependencies_of(other)
            if task_id in deps:
                other.dependency_ids = encode_dependency_ids(d for d in deps if d != task_id)
        logger.info("Removed task %d: %s", task.id, task.title)
        self.recompute()
        return task
