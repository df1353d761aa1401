from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class StoredValue(Base):
    """One entry of the durable key-value store.

    Keys in use:
        quotes: JSON array snapshot of every quote record
        lastSync: milliseconds since the epoch of the last snapshot save
        lastFilter: selected category ("all" or a category name)
    """

    __tablename__ = "kv_store"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:  # pragma: no cover - repr utility
        return f"StoredValue(key={self.key}, updated_at={self.updated_at})"
