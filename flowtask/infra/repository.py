from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from datetime import date, datetime, timezone
from typing import Any, Optional

from flowtask.config import SETTINGS
from flowtask.domain.entities import TaskEntity, parse_display_date, utcnow
from flowtask.domain.enums import Priority
from flowtask.domain.errors import PersistenceReadError

from .storage import LocalStorage

logger = logging.getLogger(__name__)

# field names used by records written before the current layout
LEGACY_FIELDS = {
    "task": "title",
    "rawDate": "dueDateRaw",
    "dueDate": "dueDateDisplay",
}


def to_record(task: TaskEntity) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": task.id,
        "title": task.title,
        "dueDateRaw": task.due_date.isoformat(),
        "dueDateDisplay": task.due_date_display,
        "priority": task.priority.value,
        "completed": task.completed,
        "createdAt": task.created_at.isoformat(),
    }
    if task.updated_at is not None:
        record["updatedAt"] = task.updated_at.isoformat()
    record["completedAt"] = task.completed_at.isoformat() if task.completed_at else None
    return record


def _migrate_record(raw: Any) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise TypeError(f"expected an object, got {type(raw).__name__}")

    record = dict(raw)
    for legacy, current in LEGACY_FIELDS.items():
        if legacy in record and current not in record:
            record[current] = record.pop(legacy)

    if not record.get("priority"):
        record["priority"] = Priority.MEDIUM.value
    if not record.get("dueDateRaw") and record.get("dueDateDisplay"):
        record["dueDateRaw"] = parse_display_date(str(record["dueDateDisplay"])).isoformat()
    return record


def _to_entity(record: dict[str, Any]) -> TaskEntity:
    raw_id = record["id"]
    if isinstance(raw_id, bool) or not isinstance(raw_id, (str, int)):
        raise ValueError(f"unusable id {raw_id!r}")
    task_id = str(raw_id).strip()
    if not task_id:
        raise ValueError("empty id")
    if not isinstance(record["title"], str):
        raise ValueError(f"unusable title {record['title']!r}")
    title = record["title"].strip()
    if not title:
        raise ValueError("empty title")
    if not record.get("dueDateRaw"):
        raise ValueError("missing due date")

    created_at = _parse_timestamp(record.get("createdAt")) or utcnow()
    # only a real JSON boolean counts; "false" is a truthy string
    completed = record.get("completed") is True
    completed_at = _parse_timestamp(record.get("completedAt")) if completed else None
    if completed and completed_at is None:
        completed_at = created_at

    return TaskEntity(
        id=task_id,
        title=title,
        due_date=date.fromisoformat(str(record["dueDateRaw"])[:10]),
        priority=_parse_priority(record.get("priority")),
        completed=completed,
        created_at=created_at,
        updated_at=_parse_timestamp(record.get("updatedAt")),
        completed_at=completed_at,
    )


def _parse_priority(value: Any) -> Priority:
    try:
        return Priority(str(value).lower())
    except ValueError:
        return Priority.MEDIUM


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class TaskRepository:
    def __init__(self, storage: LocalStorage, key: str | None = None) -> None:
        self._storage = storage
        self._key = key or SETTINGS.storage_key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[TaskEntity]:
        try:
            blob = self._storage.get_item(self._key)
        except PersistenceReadError:
            logger.exception("Stored tasks could not be read, starting with an empty list")
            return []

        if blob is None:
            logger.info("No stored tasks under %r", self._key)
            return []

        try:
            data = json.loads(blob)
        except (json.JSONDecodeError, RecursionError):
            logger.warning("Stored tasks under %r are not valid JSON, starting with an empty list", self._key)
            return []
        if not isinstance(data, list):
            logger.warning("Stored tasks under %r are not a JSON list, starting with an empty list", self._key)
            return []

        tasks: list[TaskEntity] = []
        seen: set[str] = set()
        for index, raw in enumerate(data):
            try:
                task = _to_entity(_migrate_record(raw))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping stored task #%d: %s", index, exc)
                continue
            if task.id in seen:
                logger.warning("Skipping stored task #%d: duplicate id %r", index, task.id)
                continue
            seen.add(task.id)
            tasks.append(task)

        logger.info("Loaded %d tasks from %r", len(tasks), self._key)
        return tasks

    def save(self, tasks: Sequence[TaskEntity]) -> None:
        payload = json.dumps([to_record(task) for task in tasks], ensure_ascii=False)
        self._storage.set_item(self._key, payload)
