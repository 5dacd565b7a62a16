from __future__ import annotations

from fastapi.testclient import TestClient

from chat_room_api.app.core.config import Settings
from chat_room_api.app.main import create_app


def test_lifespan_connects_store_and_runs_sweeper(app):
    assert not app.state.store.connected
    with TestClient(app) as client:
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok", "store_connected": True, "sweeper_running": True}
    assert not app.state.store.connected
    assert not app.state.sweeper.running


def test_routes_can_be_mounted_under_a_prefix(tmp_path, clock):
    settings = Settings(database_url=str(tmp_path / "chat.db"), api_prefix="/api/v1", sweep_interval_seconds=3600)
    with TestClient(create_app(settings=settings, clock=clock)) as client:
        assert client.post("/api/v1/participants", json={"name": "alice"}).status_code == 201
        assert client.get("/participants").status_code == 404


def test_cors_headers_are_sent(client):
    r = client.get("/participants", headers={"Origin": "http://example.com"})
    assert r.headers.get("access-control-allow-origin") == "*"
