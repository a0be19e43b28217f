from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from questlist.db import init_db, make_engine
from questlist.engine import Engine
from questlist.store import SqlEntityStore

TODAY = datetime(2025, 1, 15, 10, 30)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'questlist.db'}")
    init_db(engine)
    yield sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    store = SqlEntityStore(session_factory())
    yield store
    store.session.close()


@pytest.fixture
def clock():
    return FakeClock(TODAY)


@pytest.fixture
def engine(store, clock):
    return Engine(store, clock=clock)


@pytest.fixture
def onboarded(engine):
    engine.ledger.onboard("Robin", "🧙")
    return engine


@pytest.fixture
def fresh_store(session_factory):
    """A second store over the same database, to check what was committed."""
    def open_store():
        return SqlEntityStore(session_factory())
    return open_store


@pytest.fixture
def failing_commit(store, monkeypatch):
    def boom():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    def arm():
        monkeypatch.setattr(store.session, "commit", boom)
    return arm
