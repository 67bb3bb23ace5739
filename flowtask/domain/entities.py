from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from .enums import Priority

DISPLAY_DATE_FORMAT = "%m/%d/%Y"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_display_date(value: date) -> str:
    return value.strftime(DISPLAY_DATE_FORMAT)


def parse_display_date(value: str) -> date:
    """Parse a ``MM/DD/YYYY`` display string back into a date.

    Only used to migrate legacy records that were stored without a raw date.
    """
    month, day, year = value.strip().split("/")
    return date(int(year), int(month), int(day))


@dataclass
class TaskEntity:
    id: str
    title: str
    due_date: date
    priority: Priority = Priority.MEDIUM
    completed: bool = False
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def due_date_display(self) -> str:
        return format_display_date(self.due_date)


def is_overdue(task: TaskEntity, today: date | None = None) -> bool:
    if task.completed:
        return False
    return task.due_date < (today or date.today())
