from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import Any, Optional

from flowtask.config import SETTINGS
from flowtask.domain.entities import TaskEntity
from flowtask.domain.enums import NotificationLevel, Priority, StatusFilter
from flowtask.domain.errors import (
    EmptyOperationWarning,
    NotFoundError,
    PersistenceWriteError,
    ValidationError,
)
from flowtask.domain.filters import TaskFilters
from flowtask.services.export import export_filename, write_export
from flowtask.services.task_service import TaskService

logger = logging.getLogger(__name__)

COMPLETION_MESSAGES = (
    "Great job! 🎉",
    "Task completed!",
    "Well done! 🌟",
    "Another one down!",
)

DEFAULT_TITLE = "FlowTask - Modern Todo App"

Confirm = Callable[[str], bool]


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str
    field: str | None = None


@dataclass(frozen=True)
class EditBuffer:
    task_id: str
    title: str
    due_date: date
    priority: Priority


class TaskSession:
    """Command surface for the presentation layer.

    Keeps the view state (filters, search, sort direction, edit target) and
    turns store results and errors into notifications. Commands that need a
    confirmation take a ``confirm`` callable; ``None`` means confirmed.
    """

    def __init__(self, service: TaskService, export_dir: Path | None = None) -> None:
        self.service = service
        self.filters = TaskFilters()
        self.edit_buffer: Optional[EditBuffer] = None
        self.export_dir = export_dir or Path(SETTINGS.export_dir or Path.home())

    @property
    def editing_id(self) -> str | None:
        return self.edit_buffer.task_id if self.edit_buffer else None

    def view(self) -> list[TaskEntity]:
        return self.service.list_tasks(self.filters)

    def stats(self) -> dict[str, int]:
        return self.service.get_stats()

    def window_title(self) -> str:
        urgent = self.stats()["urgent_pending"]
        if urgent:
            return f"({urgent}) FlowTask - Urgent Tasks"
        return DEFAULT_TITLE

    def empty_state_hint(self) -> str:
        if self.filters.search:
            return "Try different search terms"
        if self.filters.status != StatusFilter.ALL or self.filters.priority is not None:
            return "Try changing your filters"
        return "Add a new task to get started"

    def add_or_update(self, title: str, due_date: Any, priority: Any = Priority.MEDIUM) -> Notification | None:
        buffer = self.edit_buffer
        try:
            if buffer is None:
                self.service.add_task(title, due_date, priority)
            else:
                self.edit_buffer = None
                self.service.update_task(buffer.task_id, title, due_date, priority)
        except ValidationError as exc:
            self.edit_buffer = buffer
            return Notification(NotificationLevel.ERROR, exc.message, field=exc.field)
        except NotFoundError:
            logger.debug("Edited task %s no longer exists", buffer.task_id if buffer else None)
            return None
        except PersistenceWriteError as exc:
            return self._write_failed(exc)

        if buffer is None:
            return Notification(NotificationLevel.SUCCESS, "Task added successfully!")
        return Notification(NotificationLevel.SUCCESS, "Task updated successfully!")

    def edit(self, task_id: str) -> EditBuffer | None:
        try:
            task = self.service.get_task(task_id)
        except NotFoundError:
            logger.debug("Ignoring edit of missing task %s", task_id)
            return None
        # entering edit mode drops any unsaved buffer for another task
        self.edit_buffer = EditBuffer(
            task_id=task.id,
            title=task.title,
            due_date=task.due_date,
            priority=task.priority,
        )
        return self.edit_buffer

    def cancel_edit(self) -> None:
        self.edit_buffer = None

    def toggle_complete(self, task_id: str) -> Notification | None:
        try:
            task = self.service.toggle_complete(task_id)
        except NotFoundError:
            logger.debug("Ignoring toggle of missing task %s", task_id)
            return None
        except PersistenceWriteError as exc:
            return self._write_failed(exc)

        if task.completed:
            return Notification(NotificationLevel.SUCCESS, random.choice(COMPLETION_MESSAGES))
        return Notification(NotificationLevel.INFO, "Task reopened")

    def delete(self, task_id: str, confirm: Confirm | None = None) -> Notification | None:
        try:
            task = self.service.get_task(task_id)
        except NotFoundError:
            logger.debug("Ignoring delete of missing task %s", task_id)
            return None
        if not _confirmed(confirm, "This task will be permanently removed."):
            return None

        if self.editing_id == task_id:
            self.edit_buffer = None
        try:
            self.service.delete_task(task_id)
        except NotFoundError:
            return None
        except PersistenceWriteError as exc:
            return self._write_failed(exc)
        return Notification(NotificationLevel.SUCCESS, f'Task "{task.title}" deleted')

    def delete_all(self, confirm: Confirm | None = None) -> Notification | None:
        total = self.stats()["total"]
        if not total:
            return Notification(NotificationLevel.WARNING, "No tasks to delete")
        if not _confirmed(confirm, f"All {total} tasks will be permanently removed."):
            return None

        self.edit_buffer = None
        try:
            self.service.delete_all()
        except EmptyOperationWarning as exc:
            return Notification(NotificationLevel.WARNING, str(exc))
        except PersistenceWriteError as exc:
            return self._write_failed(exc)
        return Notification(NotificationLevel.SUCCESS, "All tasks deleted")

    def clear_completed(self, confirm: Confirm | None = None) -> Notification | None:
        completed = self.service.completed_count()
        if not completed:
            return Notification(NotificationLevel.WARNING, "No completed tasks to clear")
        if not _confirmed(confirm, f"{completed} completed tasks will be removed."):
            return None

        try:
            self.service.clear_completed()
        except EmptyOperationWarning as exc:
            return Notification(NotificationLevel.WARNING, str(exc))
        except PersistenceWriteError as exc:
            notification = self._write_failed(exc)
        else:
            notification = Notification(NotificationLevel.SUCCESS, "Completed tasks cleared")
        # the removal stands even when the write fails
        if self.editing_id is not None and not self._exists(self.editing_id):
            self.edit_buffer = None
        return notification

    def set_status_filter(self, value: str | StatusFilter) -> Notification:
        self.filters = replace(self.filters, status=StatusFilter(value))
        return Notification(NotificationLevel.INFO, self._filter_message())

    def set_priority_filter(self, value: str | Priority | None) -> Notification:
        priority = None if value in (None, "", StatusFilter.ALL.value) else Priority(value)
        self.filters = replace(self.filters, priority=priority)
        return Notification(NotificationLevel.INFO, self._filter_message())

    def set_search(self, text: str | None) -> None:
        self.filters = replace(self.filters, search=text or None)

    def toggle_sort_direction(self) -> Notification:
        ascending = not self.filters.sort_ascending
        self.filters = replace(self.filters, sort_ascending=ascending)
        order = "(oldest first)" if ascending else "(newest first)"
        return Notification(NotificationLevel.INFO, f"Sorted by date {order}")

    def export_all(self, path: Path | None = None) -> Notification:
        tasks = self.service.all_tasks()
        if not tasks:
            return Notification(NotificationLevel.WARNING, "No tasks to export")

        target = path or self.export_dir / export_filename()
        try:
            write_export(tasks, target)
        except OSError as exc:
            logger.exception("Export to %s failed", target)
            return Notification(NotificationLevel.ERROR, f"Export failed: {exc}")
        logger.info("Exported %d tasks to %s", len(tasks), target)
        return Notification(NotificationLevel.SUCCESS, "Tasks exported successfully!")

    def _filter_message(self) -> str:
        parts = []
        if self.filters.status != StatusFilter.ALL:
            parts.append(self.filters.status.value)
        if self.filters.priority is not None:
            parts.append(f"{self.filters.priority.value} priority")
        if not parts:
            return "Showing: all tasks"
        return "Showing: " + " ".join(parts)

    def _exists(self, task_id: str) -> bool:
        try:
            self.service.get_task(task_id)
        except NotFoundError:
            return False
        return True

    @staticmethod
    def _write_failed(exc: PersistenceWriteError) -> Notification:
        logger.error("Saving tasks failed: %s", exc, exc_info=exc)
        return Notification(NotificationLevel.ERROR, "Changes could not be saved. They will be lost on exit.")


def _confirmed(confirm: Confirm | None, message: str) -> bool:
    return confirm is None or bool(confirm(message))
