"""Task snapshot loader.

Reads a JSON file describing the current task collection, validates each
record, and turns it into ``Task`` objects the scheduler can work on.
Also renders a computed schedule back into JSON-ready data.

Accepted file shapes::

    [{"id": 1, "title": "Design", "duration": 2, "dependency_ids": []}, ...]
    {"tasks": [...]}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .cycle_detector import find_cycles
from .dep_graph import dependencies_of, find_dangling_dependencies, parse_dependency_ids
from .exceptions import SnapshotLoadError
from .models import ScheduleResult, Task
from .schemas import TaskRecord

logger = logging.getLogger(__name__)

# Computed fields written by dump_schedule; ignored when a dump is loaded back.
_DERIVED_FIELDS = frozenset(
    {"earliest_start", "earliestStart", "is_on_critical_path", "isOnCriticalPath", "is_overdue"}
)


@dataclass
class LoadResult:
    """Result of loading a task snapshot."""

    tasks: list[Task] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _validate_record(record: Any, index: int, default_duration: int) -> tuple[Task | None, list[str]]:
    """Validate a single task record.

    Args:
        record: Raw record from the JSON file.
        index: Position in the task list (for error messages).
        default_duration: Duration used when the record omits one.

    Returns:
        The built Task (None if invalid) and a list of error messages.
    """
    if not isinstance(record, dict):
        return None, [f"Task {index}: expected an object, got {type(record).__name__}"]

    data = {k: v for k, v in record.items() if k not in _DERIVED_FIELDS}
    if "duration" not in data:
        data["duration"] = default_duration

    try:
        parsed = TaskRecord.model_validate(data)
    except ValidationError as exc:
        errors = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err["loc"]) or "record"
            errors.append(f"Task {index}: {location}: {err['msg']}")
        return None, errors

    task = Task(
        id=parsed.id,
        title=parsed.title,
        duration=parsed.duration,
        dependency_ids=parsed.dependency_ids,
        due_date=parsed.due_date,
    )
    return task, []


def _is_unreadable(raw: Any) -> bool:
    """True for a stored dependency string that does not decode to an id list."""
    if not isinstance(raw, str) or parse_dependency_ids(raw):
        return False
    try:
        return json.loads(raw) not in ([], None)
    except json.JSONDecodeError:
        return bool(raw.strip())
    except (ValueError, RecursionError):
        return True


def parse_tasks(
    payload: Any,
    *,
    default_duration: int = 1,
    strict: bool = False,
) -> LoadResult:
    """Validate decoded snapshot data and build Task objects.

    Args:
        payload: Decoded JSON, either a list of records or an object with
            a ``tasks`` list.
        default_duration: Duration for records that omit one.
        strict: Treat dangling references and cycles as errors instead
            of warnings.

    Returns:
        LoadResult with the tasks and any warnings.

    Raises:
        SnapshotLoadError: If any record fails validation, ids repeat, or
            (with strict=True) the graph has dangling references or cycles.
    """
    if isinstance(payload, dict) and "tasks" in payload:
        payload = payload["tasks"]
    if not isinstance(payload, list):
        msg = "Snapshot must be a list of tasks or an object with a 'tasks' list"
        raise SnapshotLoadError(msg)

    # Validate all records first
    tasks: list[Task] = []
    all_errors: list[str] = []
    seen: set[int] = set()
    for i, record in enumerate(payload):
        task, errors = _validate_record(record, i, default_duration)
        all_errors.extend(errors)
        if task is None:
            continue
        if task.id in seen:
            all_errors.append(f"Task {i}: duplicate id {task.id}")
            continue
        seen.add(task.id)
        tasks.append(task)

    if all_errors:
        msg = f"Validation failed: {len(all_errors)} errors"
        raise SnapshotLoadError(msg, all_errors)

    result = LoadResult(tasks=tasks)
    for task in tasks:
        if _is_unreadable(task.dependency_ids):
            result.warnings.append(
                f"Task {task.id}: unreadable dependency_ids {task.dependency_ids!r}, "
                "treated as no dependencies"
            )
    for issue in find_dangling_dependencies(tasks):
        missing = ", ".join(str(m) for m in issue.missing_ids)
        result.warnings.append(f"Task {issue.task_id}: unknown dependencies {missing}")
    for cycle in find_cycles(tasks):
        result.warnings.append(f"Circular dependency: {cycle}")

    if strict and result.warnings:
        msg = f"Strict validation failed: {len(result.warnings)} problems"
        raise SnapshotLoadError(msg, result.warnings)

    for warning in result.warnings:
        logger.warning(warning)
    logger.info("Loaded %d tasks (%d warnings)", len(tasks), len(result.warnings))
    return result


def load_tasks(
    path: str | Path,
    *,
    default_duration: int = 1,
    strict: bool = False,
) -> LoadResult:
    """Load a task snapshot from a JSON file.

    Raises:
        SnapshotLoadError: If the file cannot be read, is not valid JSON,
            or fails validation (see parse_tasks).
    """
    file_path = Path(path)
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read task file {file_path}: {exc}"
        raise SnapshotLoadError(msg) from exc

    try:
        payload = json.loads(content)
    except (ValueError, RecursionError) as exc:
        msg = f"Invalid JSON in {file_path}: {exc}"
        raise SnapshotLoadError(msg) from exc

    return parse_tasks(payload, default_duration=default_duration, strict=strict)


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def dump_schedule(
    tasks: Sequence[Task],
    result: ScheduleResult,
    today: date | None = None,
) -> dict[str, Any]:
    """Render tasks and their computed fields as JSON-ready data."""
    return {
        "project_finish": _iso(result.project_finish),
        "critical_length": result.critical_length,
        "critical_path": sorted(result.critical_path),
        "tasks": [
            {
                "id": task.id,
                "title": task.title,
                "duration": task.duration,
                "dependency_ids": dependencies_of(task),
                "due_date": _iso(task.due_date),
                "earliest_start": _iso(result.earliest_starts.get(task.id)),
                "is_on_critical_path": task.id in result.critical_path,
                "is_overdue": task.is_overdue(today),
            }
            for task in tasks
        ],
    }
