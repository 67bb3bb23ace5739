from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text

from flowtask.domain.entities import utcnow

from .db import Base


class StorageEntryModel(Base):
    __tablename__ = "local_storage"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
