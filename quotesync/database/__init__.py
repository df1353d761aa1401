"""Durable and session-scoped key-value storage."""
from .engine import get_engine, init_db, make_session_factory
from .models import Base, StoredValue
from .kv_store import (
    DurableStore,
    SessionStore,
    QUOTES_KEY,
    LAST_SYNC_KEY,
    LAST_FILTER_KEY,
    LAST_QUOTE_INDEX_KEY,
)

__all__ = [
    "get_engine",
    "init_db",
    "make_session_factory",
    "Base",
    "StoredValue",
    "DurableStore",
    "SessionStore",
    "QUOTES_KEY",
    "LAST_SYNC_KEY",
    "LAST_FILTER_KEY",
    "LAST_QUOTE_INDEX_KEY",
]
