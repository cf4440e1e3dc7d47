"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel

from mdworkspace.crud.database import init_db
from mdworkspace.crud.storage import MemoryStorage
from mdworkspace.crud.store import DocumentStore


class FakeClock:
    """Millisecond clock that only moves when told to (or backwards, to test monotonicity)."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1) -> int:
        self.now += ms
        return self.now


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="storage")
def storage_fixture():
    return MemoryStorage()


@pytest.fixture(name="clock")
def clock_fixture():
    return FakeClock()


@pytest.fixture(name="store")
def store_fixture(storage, clock):
    """A store over empty storage: starts with the seeded Welcome document."""
    return DocumentStore(storage, clock=clock)
