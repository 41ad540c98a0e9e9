from datetime import datetime, timedelta

import pytest

from memo_core.db import build_engine, init_db, make_session_factory
from memo_core.events import EventBus
from memo_core.store import EntityStore


class FakeClock:
    """Manually advanced clock so timestamps are predictable."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 14, 9, 30))


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def events():
    received = []
    bus = EventBus()
    bus.subscribe(received.append)
    return bus, received


@pytest.fixture
def store(engine, events, clock):
    bus, _ = events
    return EntityStore(make_session_factory(engine), bus, clock)
