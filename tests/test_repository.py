from __future__ import annotations

import json
from datetime import date, datetime, timezone

from flowtask.domain.entities import TaskEntity
from flowtask.domain.enums import Priority
from flowtask.domain.errors import PersistenceReadError
from flowtask.infra.repository import TaskRepository
from flowtask.infra.storage import LocalStorage


class BrokenStorage:
    def get_item(self, key: str) -> str | None:
        raise PersistenceReadError("unreadable")

    def set_item(self, key: str, value: str) -> None:
        raise AssertionError("not expected")


def _store(storage, records) -> None:
    storage.items["todos"] = json.dumps(records)


def test_load_empty_when_key_missing(repo) -> None:
    assert repo.load() == []


def test_saved_layout_uses_camel_case_fields(repo, storage) -> None:
    task = TaskEntity(
        id="1736467200000",
        title="Buy milk",
        due_date=date(2025, 1, 10),
        priority=Priority.LOW,
        created_at=datetime(2025, 1, 1, 9, 30, tzinfo=timezone.utc),
    )

    repo.save([task])
    [record] = json.loads(storage.items["todos"])

    assert record == {
        "id": "1736467200000",
        "title": "Buy milk",
        "dueDateRaw": "2025-01-10",
        "dueDateDisplay": "01/10/2025",
        "priority": "low",
        "completed": False,
        "createdAt": "2025-01-01T09:30:00+00:00",
        "completedAt": None,
    }


def test_round_trip_through_local_storage(session_factory) -> None:
    repo = TaskRepository(LocalStorage(session_factory), key="todos")
    tasks = [
        TaskEntity(id="1", title="Buy milk", due_date=date(2025, 1, 10), priority=Priority.LOW),
        TaskEntity(
            id="2",
            title="File taxes",
            due_date=date(2020, 1, 1),
            priority=Priority.URGENT,
            completed=True,
            completed_at=datetime(2020, 1, 2, tzinfo=timezone.utc),
            updated_at=datetime(2020, 1, 1, 12, tzinfo=timezone.utc),
        ),
    ]

    repo.save(tasks)

    assert repo.load() == tasks


def test_missing_priority_defaults_to_medium(repo, storage) -> None:
    _store(storage, [{"id": "1", "title": "Old", "dueDateRaw": "2024-03-04", "completed": False}])

    [task] = repo.load()

    assert task.priority == Priority.MEDIUM


def test_unknown_priority_falls_back_to_medium(repo, storage) -> None:
    _store(storage, [{"id": "1", "title": "Old", "dueDateRaw": "2024-03-04", "priority": "whenever"}])

    [task] = repo.load()

    assert task.priority == Priority.MEDIUM


def test_raw_date_is_rebuilt_from_display_date(repo, storage) -> None:
    _store(storage, [{"id": "1", "title": "Old", "dueDateDisplay": "03/04/2024", "priority": "high"}])

    [task] = repo.load()

    assert task.due_date == date(2024, 3, 4)
    assert task.due_date_display == "03/04/2024"


def test_browser_layout_records_are_migrated(repo, storage) -> None:
    _store(
        storage,
        [
            {
                "id": "1704103200000",
                "task": "Legacy task",
                "dueDate": "01/05/2024",
                "completed": True,
                "createdAt": "2024-01-01T10:00:00.000Z",
                "completedAt": "2024-01-02T08:00:00.000Z",
            }
        ],
    )

    [task] = repo.load()

    assert task.title == "Legacy task"
    assert task.due_date == date(2024, 1, 5)
    assert task.priority == Priority.MEDIUM
    assert task.completed is True
    assert task.created_at == datetime(2024, 1, 1, 10, tzinfo=timezone.utc)
    assert task.completed_at == datetime(2024, 1, 2, 8, tzinfo=timezone.utc)


def test_completed_record_without_timestamp_gets_one(repo, storage) -> None:
    _store(
        storage,
        [{"id": "1", "title": "Done", "dueDateRaw": "2024-01-05", "completed": True, "createdAt": "2024-01-01T10:00:00"}],
    )

    [task] = repo.load()

    assert task.completed_at == task.created_at


def test_pending_record_drops_stray_completed_at(repo, storage) -> None:
    _store(
        storage,
        [{"id": "1", "title": "Open", "dueDateRaw": "2024-01-05", "completed": False, "completedAt": "2024-01-02T08:00:00Z"}],
    )

    [task] = repo.load()

    assert task.completed_at is None


def test_malformed_json_degrades_to_empty(repo, storage) -> None:
    storage.items["todos"] = "{not json"

    assert repo.load() == []


def test_non_list_payload_degrades_to_empty(repo, storage) -> None:
    storage.items["todos"] = json.dumps({"id": "1"})

    assert repo.load() == []


def test_unusable_records_are_skipped(repo, storage) -> None:
    _store(
        storage,
        [
            {"id": "1", "title": "Keep", "dueDateRaw": "2024-01-05"},
            {"id": "2", "title": "   ", "dueDateRaw": "2024-01-05"},
            {"id": "3", "title": "No date"},
            {"id": "4", "title": "Bad date", "dueDateRaw": "yesterday"},
            {"id": "1", "title": "Duplicate", "dueDateRaw": "2024-01-06"},
            {"id": "5", "title": None, "dueDateRaw": "2024-01-05"},
            {"id": None, "title": "No id", "dueDateRaw": "2024-01-05"},
            {"id": True, "title": "Boolean id", "dueDateRaw": "2024-01-05"},
            "not a record",
        ],
    )

    assert [task.title for task in repo.load()] == ["Keep"]


def test_read_failure_degrades_to_empty() -> None:
    repo = TaskRepository(BrokenStorage(), key="todos")

    assert repo.load() == []


def test_deeply_nested_blob_degrades_to_empty(repo, storage) -> None:
    storage.items["todos"] = "[" * 100000 + "]" * 100000

    assert repo.load() == []


def test_only_boolean_true_marks_record_completed(repo, storage) -> None:
    _store(
        storage,
        [
            {"id": "1", "title": "String flag", "dueDateRaw": "2024-01-05", "completed": "false"},
            {"id": "2", "title": "Numeric flag", "dueDateRaw": "2024-01-05", "completed": 1},
            {"id": "3", "title": "Done", "dueDateRaw": "2024-01-05", "completed": True},
        ],
    )

    assert [(task.title, task.completed) for task in repo.load()] == [
        ("String flag", False),
        ("Numeric flag", False),
        ("Done", True),
    ]


def test_integer_ids_are_kept_as_text(repo, storage) -> None:
    _store(storage, [{"id": 1704103200000, "title": "Legacy", "dueDateRaw": "2024-01-05"}])

    [task] = repo.load()

    assert task.id == "1704103200000"
