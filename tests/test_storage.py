from __future__ import annotations

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker

from flowtask.domain.errors import PersistenceReadError, PersistenceWriteError
from flowtask.infra.models import StorageEntryModel
from flowtask.infra.storage import LocalStorage


def test_get_item_returns_none_for_missing_key(session_factory) -> None:
    assert LocalStorage(session_factory).get_item("todos") is None


def test_set_item_overwrites_single_entry(session_factory) -> None:
    storage = LocalStorage(session_factory)

    storage.set_item("todos", "[]")
    storage.set_item("todos", '[{"id": "1"}]')

    assert storage.get_item("todos") == '[{"id": "1"}]'
    with session_factory() as session:
        count = session.scalar(select(func.count()).select_from(StorageEntryModel))
    assert count == 1


def test_keys_are_independent(session_factory) -> None:
    storage = LocalStorage(session_factory)

    storage.set_item("todos", "[1]")
    storage.set_item("other", "[2]")

    assert storage.get_item("todos") == "[1]"
    assert storage.get_item("other") == "[2]"


def test_database_errors_are_wrapped() -> None:
    # no tables created on this engine
    engine = create_engine("sqlite://")
    storage = LocalStorage(sessionmaker(bind=engine))

    with pytest.raises(PersistenceReadError):
        storage.get_item("todos")
    with pytest.raises(PersistenceWriteError):
        storage.set_item("todos", "[]")
    engine.dispose()
