from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from flowtask.domain.errors import PersistenceReadError, PersistenceWriteError

from .db import SessionLocal
from .models import StorageEntryModel


class LocalStorage:
    """String key-value store kept in the ``local_storage`` table.

    Only whole values are read and written; there is no partial update.
    """

    def __init__(self, session_factory: sessionmaker = SessionLocal) -> None:
        self._session_factory = session_factory

    def get_item(self, key: str) -> str | None:
        try:
            with self._session_factory() as session:
                entry = session.get(StorageEntryModel, key)
                return entry.value if entry else None
        except SQLAlchemyError as exc:
            raise PersistenceReadError(f"Could not read storage key {key!r}") from exc

    def set_item(self, key: str, value: str) -> None:
        try:
            with self._session_factory() as session:
                entry = session.get(StorageEntryModel, key)
                if entry is None:
                    session.add(StorageEntryModel(key=key, value=value))
                else:
                    entry.value = value
                session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceWriteError(f"Could not write storage key {key!r}") from exc
