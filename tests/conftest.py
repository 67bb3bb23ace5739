from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from flowtask.domain.errors import PersistenceWriteError
from flowtask.infra import models  # noqa: F401
from flowtask.infra.db import Base
from flowtask.infra.repository import TaskRepository
from flowtask.services.session import TaskSession
from flowtask.services.task_service import TaskService


class FakeStorage:
    def __init__(self) -> None:
        self.items: dict[str, str] = {}
        self.writes = 0
        self.fail_writes = False

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceWriteError("disk full")
        self.items[key] = value
        self.writes += 1


@pytest.fixture()
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture()
def repo(storage: FakeStorage) -> TaskRepository:
    return TaskRepository(storage, key="todos")


@pytest.fixture()
def service(repo: TaskRepository) -> TaskService:
    service = TaskService(repo)
    service.load()
    return service


@pytest.fixture()
def session(service: TaskService, tmp_path: Path) -> TaskSession:
    return TaskSession(service, export_dir=tmp_path)


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False)
    engine.dispose()
