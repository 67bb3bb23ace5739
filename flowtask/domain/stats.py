from __future__ import annotations

from collections.abc import Iterable

from .entities import TaskEntity
from .enums import Priority

SUMMARY_ORDER = (Priority.URGENT, Priority.HIGH, Priority.MEDIUM, Priority.LOW)


def aggregate_stats(tasks: Iterable[TaskEntity]) -> dict[str, int]:
    total = 0
    completed = 0
    urgent_pending = 0
    for task in tasks:
        total += 1
        if task.completed:
            completed += 1
        elif task.priority == Priority.URGENT:
            urgent_pending += 1
    return {
        "total": total,
        "completed": completed,
        "pending": total - completed,
        "urgent_pending": urgent_pending,
    }


def priority_summary(tasks: Iterable[TaskEntity]) -> dict[str, int]:
    summary = {priority.value: 0 for priority in SUMMARY_ORDER}
    for task in tasks:
        summary[task.priority.value] += 1
    return summary
