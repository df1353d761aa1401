import random

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from quotesync.database.kv_store import DurableStore, SessionStore
from quotesync.store import QuoteStore


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture()
def durable(engine):
    return DurableStore(engine)


@pytest.fixture()
def session_store():
    return SessionStore()


@pytest.fixture()
def store(durable, session_store):
    return QuoteStore(durable, session_store, rng=random.Random(7))


@pytest.fixture()
def empty_store(durable, session_store):
    durable.set("quotes", "[]")
    return QuoteStore(durable, session_store, rng=random.Random(7))


class FailingWrites:
    """Durable store wrapper whose writes can be switched to fail."""

    def __init__(self, inner):
        self.inner = inner
        self.fail = False

    def get(self, key):
        return self.inner.get(key)

    def set(self, key, value):
        self.set_many({key: value})

    def set_many(self, values):
        if self.fail:
            raise RuntimeError("disk full")
        self.inner.set_many(values)

    def delete(self, key):
        self.inner.delete(key)


@pytest.fixture()
def flaky_durable(durable):
    return FailingWrites(durable)


@pytest.fixture()
def flaky_store(flaky_durable, session_store):
    return QuoteStore(flaky_durable, session_store, rng=random.Random(7))
