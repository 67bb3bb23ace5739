from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv


def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_file: str = "flowtask.log"
    log_max_bytes: int = 1_048_576
    log_backup_count: int = 5
    log_format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    storage_key: str = "todos"
    search_debounce_ms: int = 300
    notification_timeout_ms: int = 3000
    export_dir: str | None = None


def settings_from_env(environ: Mapping[str, str]) -> Settings:
    defaults = Settings(database_url=f"sqlite:///{PROJECT_ROOT / 'flowtask.db'}")

    def text(name: str, default: str) -> str:
        return environ.get(name, "").strip() or default

    def number(name: str, default: int) -> int:
        raw = environ.get(name, "").strip()
        return int(raw) if raw else default

    return Settings(
        database_url=text("DATABASE_URL", defaults.database_url),
        log_level=text("LOG_LEVEL", defaults.log_level).upper(),
        log_dir=text("LOG_DIR", defaults.log_dir),
        log_file=text("LOG_FILE", defaults.log_file),
        log_max_bytes=number("LOG_MAX_BYTES", defaults.log_max_bytes),
        log_backup_count=number("LOG_BACKUP_COUNT", defaults.log_backup_count),
        log_format=text("LOG_FORMAT", defaults.log_format),
        storage_key=text("STORAGE_KEY", defaults.storage_key),
        search_debounce_ms=number("SEARCH_DEBOUNCE_MS", defaults.search_debounce_ms),
        notification_timeout_ms=number("NOTIFICATION_TIMEOUT_MS", defaults.notification_timeout_ms),
        export_dir=environ.get("EXPORT_DIR", "").strip() or None,
    )


load_env()

SETTINGS = settings_from_env(os.environ)
