"""Exceptions for the todo scheduler.

The scheduling engine itself never raises: malformed dependency data,
dangling references and cycles are all recovered locally. These
exceptions belong to the caller-side layer (``TaskList``, the snapshot
loader and the CLI) that validates input before it reaches the engine.
"""

from __future__ import annotations


class SchedulerError(Exception):
    """Base exception for all scheduler-related errors."""

    pass


class TaskNotFoundError(SchedulerError):
    """Raised when a task id does not exist in the collection."""

    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class DependencyCycleError(SchedulerError):
    """Raised when a proposed dependency edge would close a cycle.

    Attributes:
        task_id: The task that would gain the dependency.
        dependency_id: The proposed dependency.
    """

    def __init__(self, task_id: int, dependency_id: int) -> None:
        self.task_id = task_id
        self.dependency_id = dependency_id
        super().__init__(
            f"Task {task_id} cannot depend on task {dependency_id}: "
            "this would create a circular dependency"
        )


class InvalidTaskError(SchedulerError):
    """Raised when task input fails validation at creation or edit time.

    This exception is raised when:
    - The title is empty or whitespace
    - The duration is not a positive integer
    - A task is made to depend on itself
    """

    pass


class SnapshotLoadError(SchedulerError):
    """Raised when a task snapshot file cannot be read or validated.

    Attributes:
        errors: Individual validation messages, one per problem found.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)
