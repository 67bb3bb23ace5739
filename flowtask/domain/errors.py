from __future__ import annotations


class TaskError(Exception):
    """Base class for everything the task store raises."""


class ValidationError(TaskError):
    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class NotFoundError(TaskError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id!r} not found")
        self.task_id = task_id


class PersistenceError(TaskError):
    pass


class PersistenceReadError(PersistenceError):
    pass


class PersistenceWriteError(PersistenceError):
    pass


class EmptyOperationWarning(TaskError):
    """Raised by bulk operations that have nothing to act on.

    Not a failure: callers report it as a warning and leave state untouched.
    """
