from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from .entities import TaskEntity
from .enums import Priority, StatusFilter


@dataclass(frozen=True)
class TaskFilters:
    status: StatusFilter = StatusFilter.ALL
    priority: Optional[Priority] = None
    search: str | None = None
    sort_ascending: bool = True


def apply_filters(tasks: Iterable[TaskEntity], filters: TaskFilters) -> list[TaskEntity]:
    result = list(tasks)

    if filters.status == StatusFilter.PENDING:
        result = [task for task in result if not task.completed]
    elif filters.status == StatusFilter.COMPLETED:
        result = [task for task in result if task.completed]

    if filters.priority is not None:
        result = [task for task in result if task.priority == filters.priority]

    if filters.search:
        query = filters.search.lower()
        result = [task for task in result if _matches(task, query)]

    # sorted() is stable in both directions, so equal dates keep input order
    return sorted(result, key=lambda task: task.due_date, reverse=not filters.sort_ascending)


def _matches(task: TaskEntity, query: str) -> bool:
    return (
        query in task.title.lower()
        or query in task.due_date_display
        or query in task.priority.label.lower()
    )
