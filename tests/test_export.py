from __future__ import annotations

import json
from datetime import date, datetime, timezone

from flowtask.domain.entities import TaskEntity
from flowtask.domain.enums import Priority
from flowtask.services.export import build_export, export_filename, write_export

NOW = datetime(2025, 1, 15, 8, 0, tzinfo=timezone.utc)


def make_tasks() -> list[TaskEntity]:
    return [
        TaskEntity(id="1", title="Buy milk", due_date=date(2025, 1, 10), priority=Priority.LOW, completed=True, completed_at=NOW),
        TaskEntity(id="2", title="File taxes", due_date=date(2020, 1, 1), priority=Priority.URGENT),
        TaskEntity(id="3", title="Walk dog", due_date=date(2025, 1, 11), priority=Priority.URGENT),
    ]


def test_export_filename_uses_date() -> None:
    assert export_filename(NOW) == "tasks-export-2025-01-15.json"


def test_build_export_counts() -> None:
    document = build_export(make_tasks(), NOW)

    assert document["exportedAt"] == "2025-01-15T08:00:00+00:00"
    assert document["totalTasks"] == 3
    assert document["completedTasks"] == 1
    assert document["pendingTasks"] == 2
    assert document["prioritySummary"] == {"urgent": 2, "high": 0, "medium": 0, "low": 1}
    assert [task["title"] for task in document["tasks"]] == ["Buy milk", "File taxes", "Walk dog"]


def test_write_export_produces_readable_json(tmp_path) -> None:
    path = write_export(make_tasks(), tmp_path / "out" / export_filename(NOW), NOW)

    text = path.read_text(encoding="utf-8")
    assert text.startswith("{\n  ")
    assert json.loads(text)["tasks"][1]["dueDateDisplay"] == "01/01/2020"
