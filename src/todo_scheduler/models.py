"""Domain models for the todo scheduler.

A ``Task`` is owned by whoever stores it. The engine reads ``id``,
``duration`` and ``dependency_ids`` and only ever writes the two derived
fields, ``earliest_start`` and ``is_on_critical_path``, during a
recompute pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass
class Task:
    """A unit of work with a duration and zero or more dependencies.

    Attributes:
        id: Unique identifier, immutable once assigned.
        title: Human-readable title.
        duration: Number of days the task occupies once started.
        dependency_ids: Stored dependency encoding. Usually a JSON array
            string such as ``"[1, 2]"``; an already-decoded list of ints
            or ``None`` is accepted too.
        due_date: Advisory due date, never used by the scheduling math.
        earliest_start: Derived. Soonest date the task can begin.
        is_on_critical_path: Derived. Whether the task lies on a
            longest duration-weighted chain.
    """

    id: int
    title: str = ""
    duration: int = 1
    dependency_ids: Any = None
    due_date: date | None = None
    earliest_start: date | None = None
    is_on_critical_path: bool = False

    def is_overdue(self, today: date | None = None) -> bool:
        """Return True if the due date has already passed."""
        if self.due_date is None:
            return False
        return self.due_date < (today or date.today())


@dataclass
class ScheduleResult:
    """Outcome of one full recompute over a task collection.

    Attributes:
        earliest_starts: Earliest start date per task id.
        critical_path: Ids of every task on a critical path.
        path_lengths: Longest duration-weighted chain ending at each task.
        project_finish: Latest finish date across all tasks, or None for
            an empty collection.
    """

    earliest_starts: dict[int, date] = field(default_factory=dict)
    critical_path: frozenset[int] = field(default_factory=frozenset)
    path_lengths: dict[int, int] = field(default_factory=dict)
    project_finish: date | None = None

    @property
    def critical_length(self) -> int:
        """Total duration of the critical path (0 when empty)."""
        return max(self.path_lengths.values(), default=0)
