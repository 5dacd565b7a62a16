"""Pytest configuration and shared fixtures."""
from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from chat_room_api.app.core.config import Settings
from chat_room_api.app.core.db import ChatStore
from chat_room_api.app.main import create_app


class FakeClock:
    """Controllable time source returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="function")
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="function")
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway database.

    The sweep interval is long enough that the background task never
    fires during a test; sweeps are triggered explicitly instead.
    """
    return Settings(
        database_url=str(tmp_path / "chat.db"),
        sweep_interval_seconds=3600,
        inactivity_timeout_seconds=10,
        cors_origins=["*"],
    )


@pytest.fixture(scope="function")
def store(settings: Settings):
    """A connected store for service-level tests."""
    store = ChatStore(settings.database_url)
    store.connect()
    yield store
    store.close()


@pytest.fixture(scope="function")
def app(settings: Settings, clock: FakeClock):
    return create_app(settings=settings, clock=clock)


@pytest.fixture(scope="function")
def client(app):
    """Test client with the lifespan (store connect, sweeper start) running."""
    with TestClient(app) as client:
        yield client


@pytest.fixture(scope="function")
def join(client):
    """Join the room under each given name, asserting success."""

    def _join(*names: str) -> None:
        for name in names:
            r = client.post("/participants", json={"name": name})
            assert r.status_code == 201, r.text

    return _join
