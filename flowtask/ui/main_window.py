from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QDate, Qt, QTimer
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QComboBox,
    QDateEdit,
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from flowtask.config import SETTINGS
from flowtask.domain.entities import is_overdue
from flowtask.domain.enums import NotificationLevel, StatusFilter
from flowtask.services.export import export_filename
from flowtask.services.session import Notification, TaskSession

from .widgets import (
    NOTIFICATION_COLORS,
    PRIORITY_OPTIONS,
    EmptyStateWidget,
    TaskItemContainer,
    TaskItemWidget,
    TaskListWidget,
)

STATUS_OPTIONS = [
    ("All tasks", StatusFilter.ALL.value),
    ("Pending", StatusFilter.PENDING.value),
    ("Completed", StatusFilter.COMPLETED.value),
]

PRIORITY_FILTER_OPTIONS = [("All priorities", "all")] + [
    (label, priority.value) for label, priority in PRIORITY_OPTIONS
]


class MainWindow(QWidget):
    def __init__(self, session: TaskSession):
        super().__init__()
        self.session = session
        self.resize(960, 760)

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(12, 12, 12, 12)
        main_layout.setSpacing(12)

        main_layout.addLayout(self._build_header())
        main_layout.addWidget(self._build_form())
        main_layout.addWidget(self._build_controls())

        self.task_list = TaskListWidget()
        self.task_list.setObjectName("TaskList")
        self.task_list.setSpacing(10)
        self.empty_state = EmptyStateWidget()

        self.list_stack = QStackedWidget()
        self.list_stack.addWidget(self.task_list)
        self.list_stack.addWidget(self.empty_state)
        main_layout.addWidget(self.list_stack, 1)

        self.toast_label = QLabel("")
        self.toast_label.setObjectName("Toast")
        self.toast_label.hide()
        main_layout.addWidget(self.toast_label)

        self._toast_timer = QTimer(self)
        self._toast_timer.setSingleShot(True)
        self._toast_timer.setInterval(SETTINGS.notification_timeout_ms)
        self._toast_timer.timeout.connect(self.toast_label.hide)

        self._error_timer = QTimer(self)
        self._error_timer.setSingleShot(True)
        self._error_timer.setInterval(SETTINGS.notification_timeout_ms)
        self._error_timer.timeout.connect(self.error_label.hide)

        self._search_timer = QTimer(self)
        self._search_timer.setSingleShot(True)
        self._search_timer.setInterval(SETTINGS.search_debounce_ms)
        self._search_timer.timeout.connect(self.apply_search)
        self.search_input.textChanged.connect(lambda _text: self._search_timer.start())

        self.refresh_tasks()

        QShortcut(QKeySequence("Ctrl+N"), self, self.new_task)
        QShortcut(QKeySequence("Ctrl+S"), self, self.save_task)

    def _build_header(self) -> QHBoxLayout:
        header = QHBoxLayout()
        header_title = QLabel("My tasks")
        header_title.setProperty("class", "panel-title")
        self.count_label = QLabel("")
        self.count_label.setProperty("class", "stats")
        self.stats_label = QLabel("")
        self.stats_label.setProperty("class", "stats-badge")
        header.addWidget(header_title)
        header.addWidget(self.count_label)
        header.addStretch()
        header.addWidget(self.stats_label)
        return header

    def _build_form(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("ActionBar")
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(12, 10, 12, 10)
        layout.setSpacing(8)

        row = QHBoxLayout()
        self.title_input = QLineEdit()
        self.title_input.setPlaceholderText("What needs to be done?")
        self.title_input.returnPressed.connect(self.save_task)

        self.due_input = QDateEdit()
        self.due_input.setCalendarPopup(True)
        self.due_input.setDisplayFormat("MM/dd/yyyy")
        self.due_input.setDate(QDate.currentDate())
        self.due_input.setMinimumDate(QDate.currentDate())

        self.priority_combo = QComboBox()
        for label, priority in PRIORITY_OPTIONS:
            self.priority_combo.addItem(label, priority.value)
        self.priority_combo.setCurrentIndex(1)

        self.save_button = QPushButton("Add Task")
        self.save_button.clicked.connect(self.save_task)

        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.setProperty("variant", "ghost")
        self.cancel_button.clicked.connect(self.new_task)
        self.cancel_button.hide()

        row.addWidget(self.title_input, 1)
        row.addWidget(self.due_input)
        row.addWidget(self.priority_combo)
        row.addWidget(self.save_button)
        row.addWidget(self.cancel_button)

        self.error_label = QLabel("")
        self.error_label.setObjectName("FieldError")
        self.error_label.setStyleSheet(f"color: {NOTIFICATION_COLORS[NotificationLevel.ERROR]};")
        self.error_label.hide()

        layout.addLayout(row)
        layout.addWidget(self.error_label)
        return frame

    def _build_controls(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("ControlBar")
        layout = QHBoxLayout(frame)
        layout.setContentsMargins(12, 6, 12, 6)
        layout.setSpacing(8)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search by title, date or priority")
        self.search_input.setMinimumWidth(220)

        self.status_combo = QComboBox()
        for label, key in STATUS_OPTIONS:
            self.status_combo.addItem(label, key)
        self.status_combo.currentIndexChanged.connect(self.on_status_filter_change)

        self.priority_filter_combo = QComboBox()
        for label, key in PRIORITY_FILTER_OPTIONS:
            self.priority_filter_combo.addItem(label, key)
        self.priority_filter_combo.currentIndexChanged.connect(self.on_priority_filter_change)

        self.sort_button = QPushButton("Date ↓")
        self.sort_button.setProperty("variant", "secondary")
        self.sort_button.clicked.connect(self.toggle_sort)

        export_button = QPushButton("Export")
        export_button.setProperty("variant", "ghost")
        export_button.clicked.connect(self.export_tasks)

        clear_button = QPushButton("Clear completed")
        clear_button.setProperty("variant", "secondary")
        clear_button.clicked.connect(self.clear_completed)

        delete_all_button = QPushButton("Delete all")
        delete_all_button.setProperty("variant", "danger")
        delete_all_button.clicked.connect(self.delete_all)

        layout.addWidget(self.search_input, 1)
        layout.addWidget(self.status_combo)
        layout.addWidget(self.priority_filter_combo)
        layout.addWidget(self.sort_button)
        layout.addWidget(export_button)
        layout.addWidget(clear_button)
        layout.addWidget(delete_all_button)
        return frame

    def refresh_tasks(self) -> None:
        tasks = self.session.view()
        self.task_list.clear()

        for task in tasks:
            item = QListWidgetItem()
            item.setData(Qt.UserRole, task.id)
            task_widget = TaskItemWidget(
                task,
                is_overdue(task),
                on_toggle=self.toggle_task,
                on_edit=self.edit_task,
                on_delete=self.delete_task,
            )
            widget = TaskItemContainer(task_widget)
            self.task_list.addItem(item)
            self.task_list.setItemWidget(item, widget)
            item.setSizeHint(widget.sizeHint())

        stats = self.session.stats()
        total = stats["total"]
        self.count_label.setText(f"{total} {'task' if total == 1 else 'tasks'}")
        self.stats_label.setText(
            f"Total: {total} • Completed: {stats['completed']} • Pending: {stats['pending']}"
        )
        self.setWindowTitle(self.session.window_title())

        if tasks:
            self.list_stack.setCurrentWidget(self.task_list)
        else:
            self.empty_state.set_hint(self.session.empty_state_hint())
            self.list_stack.setCurrentWidget(self.empty_state)
        self.task_list.sync_item_sizes()

    def save_task(self) -> None:
        notification = self.session.add_or_update(
            self.title_input.text(),
            self.due_input.date().toPython(),
            self.priority_combo.currentData(),
        )
        if notification and notification.field:
            self._show_field_error(notification.message)
            return
        self.clear_form()
        self._after_command(notification)

    def new_task(self) -> None:
        self.session.cancel_edit()
        self.clear_form()
        self.title_input.setFocus()

    def clear_form(self) -> None:
        self.title_input.clear()
        self.due_input.setMinimumDate(QDate.currentDate())
        self.due_input.setDate(QDate.currentDate())
        self.priority_combo.setCurrentIndex(1)
        self._sync_edit_mode()

    def edit_task(self, task_id: str) -> None:
        buffer = self.session.edit(task_id)
        if buffer is None:
            return
        self.title_input.setText(buffer.title)
        due = QDate(buffer.due_date.year, buffer.due_date.month, buffer.due_date.day)
        # overdue tasks stay editable without moving their date
        self.due_input.setMinimumDate(min(due, QDate.currentDate()))
        self.due_input.setDate(due)
        priority_index = self.priority_combo.findData(buffer.priority.value)
        if priority_index >= 0:
            self.priority_combo.setCurrentIndex(priority_index)
        self._sync_edit_mode()
        self.title_input.setFocus()

    def toggle_task(self, task_id: str) -> None:
        self._after_command(self.session.toggle_complete(task_id))

    def delete_task(self, task_id: str) -> None:
        editing = self.session.editing_id == task_id
        self._after_command(self.session.delete(task_id, confirm=self._confirm))
        if editing and self.session.editing_id is None:
            self.clear_form()

    def delete_all(self) -> None:
        editing = self.session.editing_id is not None
        self._after_command(self.session.delete_all(confirm=self._confirm))
        if editing and self.session.editing_id is None:
            self.clear_form()

    def clear_completed(self) -> None:
        editing = self.session.editing_id is not None
        self._after_command(self.session.clear_completed(confirm=self._confirm))
        if editing and self.session.editing_id is None:
            self.clear_form()

    def apply_search(self) -> None:
        self.session.set_search(self.search_input.text())
        self.refresh_tasks()

    def on_status_filter_change(self, _index: int) -> None:
        self._after_command(self.session.set_status_filter(self.status_combo.currentData()))

    def on_priority_filter_change(self, _index: int) -> None:
        self._after_command(self.session.set_priority_filter(self.priority_filter_combo.currentData()))

    def toggle_sort(self) -> None:
        notification = self.session.toggle_sort_direction()
        self.sort_button.setText("Date ↓" if self.session.filters.sort_ascending else "Date ↑")
        self._after_command(notification)

    def export_tasks(self) -> None:
        if not self.session.stats()["total"]:
            self._after_command(self.session.export_all())
            return
        path, _ = QFileDialog.getSaveFileName(
            self,
            "Export tasks",
            str(self.session.export_dir / export_filename()),
            "JSON Files (*.json)",
        )
        if not path:
            return
        self._after_command(self.session.export_all(Path(path)))

    def _confirm(self, message: str) -> bool:
        answer = QMessageBox.question(self, "Are you sure?", message)
        return answer == QMessageBox.Yes

    def _after_command(self, notification: Notification | None) -> None:
        self._show_notification(notification)
        # item widgets may be the signal sender, rebuild the list after the slot returns
        QTimer.singleShot(0, self.refresh_tasks)

    def _show_notification(self, notification: Notification | None) -> None:
        if notification is None:
            return
        color = NOTIFICATION_COLORS[notification.level]
        self.toast_label.setText(notification.message)
        self.toast_label.setProperty("level", notification.level.value)
        self.toast_label.setStyleSheet(
            f"background-color: {color}; color: #FFFFFF; border-radius: 6px; padding: 8px 12px;"
        )
        self.toast_label.show()
        self._toast_timer.start()

    def _show_field_error(self, message: str) -> None:
        self.error_label.setText(message)
        self.error_label.show()
        self._error_timer.start()

    def _sync_edit_mode(self) -> None:
        editing = self.session.editing_id is not None
        self.save_button.setText("Update Task" if editing else "Add Task")
        self.cancel_button.setVisible(editing)
