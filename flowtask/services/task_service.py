from __future__ import annotations

from datetime import date, datetime
from typing import Any

from flowtask.domain.entities import TaskEntity, utcnow
from flowtask.domain.enums import Priority
from flowtask.domain.errors import EmptyOperationWarning, NotFoundError, ValidationError
from flowtask.domain.filters import TaskFilters, apply_filters
from flowtask.domain.stats import aggregate_stats
from flowtask.infra.repository import TaskRepository


class TaskService:
    """Owns the task collection and writes it back after every change.

    Call ``load()`` once before use. Mutations are applied in memory first,
    so a ``PersistenceWriteError`` from the repository leaves the collection
    in its new state.
    """

    def __init__(self, repo: TaskRepository) -> None:
        self._repo = repo
        self._tasks: list[TaskEntity] = []

    def load(self) -> None:
        self._tasks = self._repo.load()

    def list_tasks(self, filters: TaskFilters | None = None) -> list[TaskEntity]:
        return apply_filters(self._tasks, filters or TaskFilters())

    def all_tasks(self) -> list[TaskEntity]:
        return list(self._tasks)

    def get_task(self, task_id: str) -> TaskEntity:
        task = next((t for t in self._tasks if t.id == task_id), None)
        if task is None:
            raise NotFoundError(task_id)
        return task

    def add_task(self, title: str, due_date: Any, priority: Any = Priority.MEDIUM) -> TaskEntity:
        clean_title, clean_date, clean_priority = _validate(title, due_date, priority)
        now = utcnow()
        task = TaskEntity(
            id=self._next_id(now),
            title=clean_title,
            due_date=clean_date,
            priority=clean_priority,
            created_at=now,
        )
        self._tasks.append(task)
        self._save()
        return task

    def update_task(self, task_id: str, title: str, due_date: Any, priority: Any = Priority.MEDIUM) -> TaskEntity:
        task = self.get_task(task_id)
        clean_title, clean_date, clean_priority = _validate(title, due_date, priority)
        task.title = clean_title
        task.due_date = clean_date
        task.priority = clean_priority
        task.updated_at = utcnow()
        self._save()
        return task

    def toggle_complete(self, task_id: str) -> TaskEntity:
        task = self.get_task(task_id)
        task.completed = not task.completed
        task.completed_at = utcnow() if task.completed else None
        self._save()
        return task

    def delete_task(self, task_id: str) -> TaskEntity:
        task = self.get_task(task_id)
        self._tasks.remove(task)
        self._save()
        return task

    def delete_all(self) -> int:
        if not self._tasks:
            raise EmptyOperationWarning("No tasks to delete")
        removed = len(self._tasks)
        self._tasks = []
        self._save()
        return removed

    def clear_completed(self) -> int:
        kept = [task for task in self._tasks if not task.completed]
        removed = len(self._tasks) - len(kept)
        if not removed:
            raise EmptyOperationWarning("No completed tasks to clear")
        self._tasks = kept
        self._save()
        return removed

    def completed_count(self) -> int:
        return sum(1 for task in self._tasks if task.completed)

    def get_stats(self) -> dict[str, int]:
        return aggregate_stats(self._tasks)

    def _save(self) -> None:
        self._repo.save(self._tasks)

    def _next_id(self, now: datetime) -> str:
        existing = {task.id for task in self._tasks}
        candidate = int(now.timestamp() * 1000)
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)


def _validate(title: str | None, due_date: Any, priority: Any) -> tuple[str, date, Priority]:
    clean_title = (title or "").strip()
    if not clean_title:
        raise ValidationError("Task cannot be empty!", field="title")
    return clean_title, _coerce_date(due_date), _coerce_priority(priority)


def _coerce_date(value: Any) -> date:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Please select a due date!", field="due_date")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError("Please select a valid due date!", field="due_date") from None


def _coerce_priority(value: Any) -> Priority:
    if value is None or value == "":
        return Priority.MEDIUM
    if isinstance(value, Priority):
        return value
    try:
        return Priority(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown priority: {value}", field="priority") from None
