from __future__ import annotations

from PySide6.QtCore import QSize, Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from flowtask.domain.entities import TaskEntity
from flowtask.domain.enums import NotificationLevel, Priority

PRIORITY_OPTIONS = [
    ("Low", Priority.LOW),
    ("Medium", Priority.MEDIUM),
    ("High", Priority.HIGH),
    ("Urgent", Priority.URGENT),
]

# (text colour, badge background)
PRIORITY_COLORS = {
    Priority.LOW: ("#10B981", "rgba(16, 185, 129, 0.15)"),
    Priority.MEDIUM: ("#3B82F6", "rgba(59, 130, 246, 0.15)"),
    Priority.HIGH: ("#F59E0B", "rgba(245, 158, 11, 0.15)"),
    Priority.URGENT: ("#EF4444", "rgba(239, 68, 68, 0.15)"),
}

NOTIFICATION_COLORS = {
    NotificationLevel.SUCCESS: "#10B981",
    NotificationLevel.INFO: "#3B82F6",
    NotificationLevel.WARNING: "#F59E0B",
    NotificationLevel.ERROR: "#EF4444",
}

OVERDUE_COLOR = "#EF4444"


class TaskItemWidget(QWidget):
    def __init__(self, task: TaskEntity, overdue: bool, on_toggle, on_edit, on_delete):
        super().__init__()
        self.task = task
        self._on_toggle = on_toggle
        self._on_edit = on_edit
        self._on_delete = on_delete

        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.setMinimumHeight(64)
        self.setProperty("completed", task.completed)
        self.setProperty("overdue", overdue)

        self.done_check = QCheckBox()
        self.done_check.setChecked(task.completed)
        self.done_check.toggled.connect(self._handle_toggle)

        title = QLabel(task.title)
        title.setProperty("class", "task-title")
        title.setWordWrap(True)
        title.setMinimumWidth(0)
        title.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        if task.completed:
            font = title.font()
            font.setStrikeOut(True)
            title.setFont(font)

        date_text = task.due_date_display
        if overdue:
            date_text += "  ⚠ Overdue"
        due = QLabel(date_text)
        due.setProperty("class", "task-meta")
        if overdue:
            due.setStyleSheet(f"color: {OVERDUE_COLOR};")

        color, background = PRIORITY_COLORS[task.priority]
        priority = QLabel(task.priority.label)
        priority.setProperty("class", "task-priority")
        priority.setStyleSheet(
            f"color: {color}; background-color: {background}; border-radius: 6px; padding: 2px 8px;"
        )
        priority.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)

        status = QLabel("Completed" if task.completed else "Pending")
        status.setProperty("class", "task-badge")

        meta = QHBoxLayout()
        meta.setSpacing(8)
        meta.addWidget(due)
        meta.addWidget(priority)
        meta.addWidget(status)
        meta.addStretch()

        content = QVBoxLayout()
        content.setSpacing(4)
        content.addWidget(title)
        content.addLayout(meta)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(10)
        layout.addWidget(self.done_check, 0, Qt.AlignTop)
        layout.addLayout(content, 1)

        if not task.completed:
            edit_button = QPushButton("Edit")
            edit_button.setProperty("variant", "ghost")
            edit_button.clicked.connect(lambda: self._on_edit(self.task.id))
            layout.addWidget(edit_button, 0, Qt.AlignTop)

        delete_button = QPushButton("Delete")
        delete_button.setProperty("variant", "danger")
        delete_button.clicked.connect(lambda: self._on_delete(self.task.id))
        layout.addWidget(delete_button, 0, Qt.AlignTop)

    def _handle_toggle(self, _checked: bool) -> None:
        self._on_toggle(self.task.id)


class TaskItemContainer(QWidget):
    def __init__(self, task_widget: TaskItemWidget, h_margin: int = 12, parent=None):
        super().__init__(parent)
        self.task_widget = task_widget
        layout = QHBoxLayout(self)
        layout.setContentsMargins(h_margin, 0, h_margin, 0)
        layout.setSpacing(0)
        layout.addWidget(task_widget)

    @property
    def task(self) -> TaskEntity:
        return self.task_widget.task


class TaskListWidget(QListWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._h_margin = 12
        self._v_margin = 8
        self.setSelectionMode(QAbstractItemView.NoSelection)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self._update_viewport_margins()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.sync_item_sizes()

    def _update_viewport_margins(self) -> None:
        scrollbar_width = self.verticalScrollBar().width() or self.verticalScrollBar().sizeHint().width()
        right_margin = self._h_margin + (scrollbar_width if self.verticalScrollBar().isVisible() else 0)
        self.setViewportMargins(self._h_margin, self._v_margin, right_margin, self._v_margin)

    def sync_item_sizes(self) -> None:
        self._update_viewport_margins()
        viewport_width = self.viewport().width()
        for index in range(self.count()):
            item = self.item(index)
            widget = self.itemWidget(item)
            if widget:
                widget.setMinimumWidth(viewport_width)
                widget.setMaximumWidth(viewport_width)
                widget.adjustSize()
                hint = widget.sizeHint()
                item.setSizeHint(QSize(viewport_width, hint.height()))
                widget.resize(viewport_width, hint.height())


class EmptyStateWidget(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.title = QLabel("No tasks found")
        self.title.setProperty("class", "panel-title")
        self.title.setAlignment(Qt.AlignCenter)

        self.hint = QLabel("")
        self.hint.setProperty("class", "task-meta")
        self.hint.setAlignment(Qt.AlignCenter)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 32, 12, 32)
        layout.addWidget(self.title)
        layout.addWidget(self.hint)
        layout.addStretch()

    def set_hint(self, text: str) -> None:
        self.hint.setText(text)
