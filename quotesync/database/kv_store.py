"""Key-value stores backing the quote collection.

Two scopes mirror what a browser offers a page:

- DurableStore: rows in a SQL table, survives restarts.
- SessionStore: a process-local dict, gone when the process exits.

Both expose the same small get/set/set_many/delete surface so the quote
store never cares which one it is talking to.
"""
import threading
from typing import Dict, Mapping, Optional

from sqlalchemy.engine import Engine

from .engine import get_engine, init_db, make_session_factory
from .models import StoredValue

# Durable keys
QUOTES_KEY = "quotes"
LAST_SYNC_KEY = "lastSync"
LAST_FILTER_KEY = "lastFilter"

# Session keys
LAST_QUOTE_INDEX_KEY = "lastQuoteIndex"


class DurableStore:
    """SQL-backed string store.

    set_many commits all keys in a single transaction, so readers never see
    a snapshot without its matching timestamp.
    """

    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine or get_engine()
        init_db(self.engine)
        self._Session = make_session_factory(self.engine)

    def get(self, key: str) -> Optional[str]:
        with self._Session() as session:
            row = session.get(StoredValue, key)
            return None if row is None else row.value

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, str]) -> None:
        with self._Session() as session:
            with session.begin():
                for key, value in values.items():
                    row = session.get(StoredValue, key)
                    if row is None:
                        session.add(StoredValue(key=key, value=value))
                    else:
                        row.value = value

    def delete(self, key: str) -> None:
        with self._Session() as session:
            with session.begin():
                row = session.get(StoredValue, key)
                if row is not None:
                    session.delete(row)


class SessionStore:
    """In-memory string store scoped to the current process."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, str]) -> None:
        with self._lock:
            self._values.update(values)

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
