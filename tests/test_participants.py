from __future__ import annotations

import pytest

from chat_room_api.app.core.db import StoreError


def test_join_creates_participant_and_announces(client, clock):
    r = client.post("/participants", json={"name": "alice"})
    assert r.status_code == 201
    assert r.content == b""

    participants = client.get("/participants").json()
    assert len(participants) == 1
    assert participants[0]["name"] == "alice"
    assert participants[0]["lastStatus"] == int(clock() * 1000)

    messages = client.get("/messages", headers={"User": "alice"}).json()
    assert len(messages) == 1
    assert messages[0]["from"] == "alice"
    assert messages[0]["to"] == "Todos"
    assert messages[0]["text"] == "joins"
    assert messages[0]["type"] == "status"


def test_each_distinct_join_adds_exactly_one(client, join, app):
    for expected, name in enumerate(["alice", "bob", "carol"], start=1):
        join(name)
        assert len(client.get("/participants").json()) == expected
        assert app.state.store.count_messages() == expected


def test_duplicate_name_is_rejected_without_writes(client, join, app):
    join("alice")

    r = client.post("/participants", json={"name": "alice"})
    assert r.status_code == 409

    assert [p["name"] for p in client.get("/participants").json()] == ["alice"]
    assert app.state.store.count_messages() == 1


def test_name_is_trimmed_before_uniqueness_check(client, join):
    join("alice")
    r = client.post("/participants", json={"name": "  alice "})
    assert r.status_code == 409


@pytest.mark.parametrize(
    "body",
    [{}, {"name": ""}, {"name": "   "}, {"name": 42}, {"name": None}, {"nome": "alice"}],
)
def test_invalid_name_is_rejected(client, app, body):
    r = client.post("/participants", json=body)
    assert r.status_code == 422
    assert client.get("/participants").json() == []
    assert app.state.store.count_messages() == 0


def test_join_keeps_participant_when_announcement_fails(client, app, monkeypatch):
    def broken_insert(*args, **kwargs):
        raise StoreError("disk I/O error")

    monkeypatch.setattr(app.state.store, "insert_message", broken_insert)

    r = client.post("/participants", json={"name": "alice"})
    assert r.status_code == 500
    assert r.json() == {"detail": "Internal server error"}

    monkeypatch.undo()
    assert [p["name"] for p in client.get("/participants").json()] == ["alice"]
    assert app.state.store.count_messages() == 0


def test_store_failure_is_reported_as_generic_error(client, app):
    app.state.store.close()
    r = client.get("/participants")
    assert r.status_code == 500
    assert r.json() == {"detail": "Internal server error"}
