from __future__ import annotations

import pytest

from storage import auth as auth_module
from storage.auth import LocalSessionStore
from storage.records import JsonRecordStore, RecordStoreError


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """PBKDF2 at full strength makes every sign-up take ~0.2s."""
    monkeypatch.setattr(auth_module, "_ITERATIONS", 1_000)


@pytest.fixture
def store() -> JsonRecordStore:
    return JsonRecordStore(path=None)


@pytest.fixture
def sessions(store) -> LocalSessionStore:
    return LocalSessionStore(store)


class FailingStore:
    """Record store whose writes are always rejected."""

    def __init__(self, inner):
        self.inner = inner
        self.attempts = 0

    def select(self, table, filters=None, order=None):
        return self.inner.select(table, filters, order)

    def insert(self, table, record):
        self.attempts += 1
        raise RecordStoreError("insert rejected")

    def update(self, table, record, match):
        self.attempts += 1
        raise RecordStoreError("update rejected")


@pytest.fixture
def failing_store(store) -> FailingStore:
    return FailingStore(store)
