from __future__ import annotations

import sys

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory

from flowtask.infra.db import init_db
from flowtask.infra.logging import setup_logging
from flowtask.infra.repository import TaskRepository
from flowtask.infra.storage import LocalStorage
from flowtask.services.session import TaskSession
from flowtask.services.task_service import TaskService
from flowtask.ui.main_window import MainWindow


def _apply_dark_palette(app: QApplication) -> None:
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor("#0F172A"))
    palette.setColor(QPalette.WindowText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Base, QColor("#111827"))
    palette.setColor(QPalette.AlternateBase, QColor("#1B2230"))
    palette.setColor(QPalette.Text, QColor("#E6EDF3"))
    palette.setColor(QPalette.Button, QColor("#202A3B"))
    palette.setColor(QPalette.ButtonText, QColor("#E6EDF3"))
    palette.setColor(QPalette.ToolTipBase, QColor("#1B2230"))
    palette.setColor(QPalette.ToolTipText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Highlight, QColor("#2563EB"))
    palette.setColor(QPalette.HighlightedText, QColor("#FFFFFF"))
    app.setPalette(palette)


def build_session() -> TaskSession:
    service = TaskService(TaskRepository(LocalStorage()))
    service.load()
    return TaskSession(service)


def main() -> None:
    setup_logging()
    try:
        init_db()
    except Exception as exc:  # noqa: BLE001
        app = QApplication(sys.argv)
        QMessageBox.critical(None, "DB error", str(exc))
        return

    app = QApplication(sys.argv)
    app.setStyle(QStyleFactory.create("Fusion"))
    _apply_dark_palette(app)
    app.setFont(QFont("Segoe UI", 10))

    window = MainWindow(build_session())
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
