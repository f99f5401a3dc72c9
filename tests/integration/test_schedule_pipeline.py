"""End-to-end scheduling flows: snapshot file -> TaskList edits -> dump."""

from __future__ import annotations

import json
import random
from datetime import date, timedelta
from pathlib import Path

import pytest

from todo_scheduler import (
    DependencyCycleError,
    TaskList,
    compute_critical_path,
    compute_earliest_starts,
    compute_path_lengths,
    dump_schedule,
    load_tasks,
    would_create_cycle,
)
from todo_scheduler.dep_graph import dependencies_of

TODAY = date(2026, 3, 2)

KITCHEN_REMODEL = [
    {"id": 1, "title": "Measure kitchen", "duration": 1},
    {"id": 2, "title": "Order cabinets", "duration": 10, "dependency_ids": [1]},
    {"id": 3, "title": "Remove old counters", "duration": 2, "dependency_ids": [1]},
    {"id": 4, "title": "Rough plumbing", "duration": 3, "dependency_ids": [3]},
    {"id": 5, "title": "Install cabinets", "duration": 2, "dependency_ids": [2, 4]},
    {"id": 6, "title": "Countertops", "duration": 4, "dependency_ids": "[5]"},
    {"id": 7, "title": "Paint", "duration": 2, "dependency_ids": [3]},
]


@pytest.fixture
def snapshot(tmp_path: Path) -> Path:
    path = tmp_path / "kitchen.json"
    path.write_text(json.dumps({"tasks": KITCHEN_REMODEL}), encoding="utf-8")
    return path


def test_snapshot_to_schedule(snapshot: Path) -> None:
    loaded = load_tasks(snapshot)
    tasks = TaskList(loaded.tasks, today=TODAY)

    result = tasks.schedule

    assert result.earliest_starts[2] == TODAY + timedelta(days=1)
    assert result.earliest_starts[5] == TODAY + timedelta(days=11)
    assert result.earliest_starts[6] == TODAY + timedelta(days=13)
    assert result.critical_path == frozenset({1, 2, 5, 6})
    assert result.project_finish == TODAY + timedelta(days=17)


def test_edits_keep_schedule_consistent(snapshot: Path) -> None:
    tasks = TaskList(load_tasks(snapshot).tasks, today=TODAY)

    # Plumbing slips badly and becomes the bottleneck
    tasks.set_duration(4, 12)
    assert tasks.schedule.critical_path == frozenset({1, 3, 4, 5, 6})

    # Countertops already depend on measuring through the cabinets
    with pytest.raises(DependencyCycleError):
        tasks.add_dependency(1, 6)

    tasks.remove_task(3)
    assert dependencies_of(tasks.get(4)) == []
    assert dependencies_of(tasks.get(7)) == []
    assert tasks.get(7).earliest_start == TODAY

    fresh = compute_earliest_starts(tasks.tasks, TODAY)
    assert {t.id: t.earliest_start for t in tasks} == fresh


def test_dump_round_trip(snapshot: Path, tmp_path: Path) -> None:
    tasks = TaskList(load_tasks(snapshot).tasks, today=TODAY)
    out = tmp_path / "scheduled.json"
    out.write_text(json.dumps(dump_schedule(tasks.tasks, tasks.schedule, TODAY)), encoding="utf-8")

    reloaded = TaskList(load_tasks(out).tasks, today=TODAY)

    assert reloaded.schedule.earliest_starts == tasks.schedule.earliest_starts
    assert reloaded.schedule.critical_path == tasks.schedule.critical_path


@pytest.mark.slow
def test_large_random_dag_properties() -> None:
    """Random DAG of 3000 tasks: forward-pass equation and critical set hold."""
    rng = random.Random(1234)
    tasks = TaskList(today=TODAY)
    for i in range(1, 3001):
        candidates = list(range(max(1, i - 40), i))
        deps = rng.sample(candidates, k=min(len(candidates), rng.randint(0, 3)))
        tasks.add_task(f"Task {i}", duration=rng.randint(1, 9), dependency_ids=deps)

    all_tasks = tasks.tasks
    by_id = {t.id: t for t in all_tasks}
    starts = compute_earliest_starts(all_tasks, TODAY)
    for task in all_tasks:
        expected = max(
            [starts[d] + timedelta(days=by_id[d].duration) for d in dependencies_of(task)],
            default=TODAY,
        )
        assert starts[task.id] == expected

    lengths = compute_path_lengths(all_tasks)
    critical = compute_critical_path(all_tasks)
    assert critical
    assert max(lengths[t] for t in critical) == max(lengths.values())
    for task in all_tasks[-50:]:
        for dep_id in dependencies_of(task):
            assert would_create_cycle(dep_id, task.id, all_tasks)
