"""Todo Scheduler.

This package computes dependency-aware schedules for a task list: the
earliest date each task can start, the tasks on the critical path, and
whether a new dependency would create a cycle.
"""

from __future__ import annotations

from .critical_path import compute_critical_path, compute_path_lengths, critical_edges
from .cycle_detector import find_cycles, would_create_cycle
from .dep_graph import (
    DanglingReference,
    dependencies_of,
    dependents_of,
    dependency_levels,
    encode_dependency_ids,
    find_dangling_dependencies,
    parse_dependency_ids,
    related_task_ids,
)
from .earliest_start import compute_earliest_starts
from .exceptions import (
    DependencyCycleError,
    InvalidTaskError,
    SchedulerError,
    SnapshotLoadError,
    TaskNotFoundError,
)
from .models import ScheduleResult, Task
from .scheduler import TaskList, recompute_schedule
from .task_loader import LoadResult, dump_schedule, load_tasks, parse_tasks
from .cli import cli, main

__all__ = [
    # Models
    "Task",
    "ScheduleResult",
    # Graph accessor
    "DanglingReference",
    "dependencies_of",
    "dependents_of",
    "dependency_levels",
    "encode_dependency_ids",
    "find_dangling_dependencies",
    "parse_dependency_ids",
    "related_task_ids",
    # Scheduling engine
    "compute_critical_path",
    "compute_earliest_starts",
    "compute_path_lengths",
    "critical_edges",
    "find_cycles",
    "would_create_cycle",
    # Task list
    "TaskList",
    "recompute_schedule",
    # Snapshot loader
    "LoadResult",
    "dump_schedule",
    "load_tasks",
    "parse_tasks",
    # Errors
    "SchedulerError",
    "TaskNotFoundError",
    "DependencyCycleError",
    "InvalidTaskError",
    "SnapshotLoadError",
    # CLI
    "cli",
    "main",
]
