"""
Shared pytest fixtures for the debate live backend.

Every test gets its own in-memory SQLite database, a controllable clock
and a recording WebSocket subscriber, so coordinator behaviour can be
asserted without a real server.
"""

import json
import os
from datetime import datetime, timedelta, timezone
from typing import List

# Keep the module-level engine off disk; tests build their own databases.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.websockets import WebSocketState

from debate_live.core.database import Base, import_models
from debate_live.models.stream import Stream
from debate_live.services.live_coordinator import LiveCoordinator
from debate_live.services.websocket_service import WebSocketManager


class FakeClock:
    """Manually advanced clock; call it to read the current time."""

    def __init__(self, start: datetime = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now = self.now + timedelta(seconds=seconds)


class RecordingSocket:
    """Stand-in for a connected WebSocket that records what it receives."""

    def __init__(self, fail: bool = False):
        self.client_state = WebSocketState.CONNECTED
        self.fail = fail
        self.accepted = False
        self.messages: List[dict] = []

    async def accept(self):
        self.accepted = True

    async def send_text(self, text: str):
        if self.fail:
            raise RuntimeError("socket closed")
        self.messages.append(json.loads(text))

    def of_type(self, message_type: str) -> List[dict]:
        return [m for m in self.messages if m.get("type") == message_type]

    def clear(self):
        self.messages.clear()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    import_models()
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager():
    return WebSocketManager()


@pytest.fixture
def subscriber(manager):
    socket = RecordingSocket()
    manager.register(socket)
    return socket


@pytest.fixture
def streams(session_factory):
    """Two enabled streams and one disabled stream."""
    with session_factory() as session:
        session.add_all([
            Stream(id="stream-001", name="主会场", url="rtmp://live.example.com/main", debate_title="AI是否会取代教师"),
            Stream(id="stream-002", name="分会场", url="rtmp://live.example.com/second"),
            Stream(id="stream-003", name="备用", url="rtmp://live.example.com/backup", enabled=False),
        ])
        session.commit()
    return ["stream-001", "stream-002", "stream-003"]


@pytest.fixture
def coordinator(session_factory, manager, clock, streams):
    """Coordinator with the production window offsets and a fake clock.

    Timers still sleep on the real event loop, so the long auto-stop keeps
    them from firing while a test runs.
    """
    return LiveCoordinator(
        session_factory,
        manager,
        vote_window_open_offset=45,
        vote_window_close_offset=60,
        auto_stop_after=3600,
        clock=clock,
    )
