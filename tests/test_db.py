from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from chat_room_api.app.core.db import (
    ChatStore,
    DuplicateNameError,
    StoreUnavailableError,
    resolve_database_path,
)


def test_connect_applies_migrations_once(tmp_path: Path):
    path = tmp_path / "chat.db"
    store = ChatStore(str(path))
    store.connect()
    store.connect()

    conn = sqlite3.connect(path)
    try:
        versions = [row[0] for row in conn.execute("SELECT version FROM migrations ORDER BY version")]
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    finally:
        conn.close()
    assert versions == [1, 2]
    assert {"participants", "messages"} <= tables


def test_unique_index_rejects_duplicate_names(store):
    store.insert_participant("alice", 1)
    with pytest.raises(DuplicateNameError) as excinfo:
        store.insert_participant("alice", 2)
    assert excinfo.value.name == "alice"
    assert len(store.list_participants()) == 1


def test_closed_store_is_unavailable(store):
    store.close()
    assert not store.connected
    with pytest.raises(StoreUnavailableError):
        store.list_participants()


def test_inactive_participants_use_strict_cutoff(store):
    store.insert_participant("old", 100)
    store.insert_participant("edge", 200)
    store.insert_participant("new", 300)
    assert [p["name"] for p in store.find_inactive_participants(200)] == ["old"]


def test_visible_messages_in_insertion_order(store):
    store.insert_message("alice", "Todos", "1", "message", "10:00:00")
    store.insert_message("bob", "carol", "2", "private_message", "10:00:01")
    store.insert_message("carol", "alice", "3", "private_message", "10:00:02")
    store.insert_message("alice", "bob", "4", "private_message", "10:00:03")

    assert [m["text"] for m in store.find_messages_visible_to("alice", "Todos")] == ["1", "3", "4"]
    assert [m["text"] for m in store.find_messages_visible_to("carol", "Todos")] == ["1", "2", "3"]


def test_relative_database_path_resolves_to_project_root():
    root = Path(__file__).resolve().parent.parent
    assert resolve_database_path("chat_room.db") == str(root / "chat_room.db")
    assert resolve_database_path("/tmp/chat.db") == "/tmp/chat.db"
