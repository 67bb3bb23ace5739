from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from flowtask.config import PROJECT_ROOT, SETTINGS, Settings


def build_log_handlers(settings: Settings = SETTINGS) -> list[logging.Handler]:
    """Rotating file handler under ``log_dir`` plus console output, sharing one format."""
    log_dir = PROJECT_ROOT / settings.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(settings.log_format)
    file_handler = RotatingFileHandler(
        log_dir / settings.log_file,
        maxBytes=settings.log_max_bytes,
        backupCount=settings.log_backup_count,
        encoding="utf-8",
    )
    console_handler = logging.StreamHandler()
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
    return [file_handler, console_handler]


def setup_logging(settings: Settings = SETTINGS) -> None:
    logging.basicConfig(level=settings.log_level, handlers=build_log_handlers(settings))
    logging.getLogger(__name__).debug("Logging to %s", PROJECT_ROOT / settings.log_dir / settings.log_file)
