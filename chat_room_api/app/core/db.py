"""
SQLite storage for participants and messages.

``ChatStore`` is the store client handed to services and to the
liveness sweeper.  It is created by the application factory, connected
on startup (which applies pending migrations) and closed on shutdown;
there is no module-level connection.  Every operation opens its own
short-lived connection, so each call is an independent unit of work:
compound actions such as "delete participant, then announce the
departure" are not transactional.

The migration mechanism stores applied versions in the ``migrations``
table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional


logger = logging.getLogger(__name__)


MIGRATIONS: List[tuple] = [
    # Migration 1: participants and messages
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS participants (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            last_status INTEGER NOT NULL
        );

        -- Append-only log.  Sender and recipient reference participants
        -- by name only, so messages outlive the participants they mention.
        CREATE TABLE IF NOT EXISTS messages (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            sender TEXT NOT NULL,
            recipient TEXT NOT NULL,
            text TEXT NOT NULL,
            type TEXT NOT NULL,
            time TEXT NOT NULL
        );
        """,
    ),
    # Migration 2: enforce name uniqueness in the store itself and speed up
    # the sweeper's staleness scan.
    (
        2,
        """
        CREATE UNIQUE INDEX IF NOT EXISTS idx_participants_name ON participants(name);
        CREATE INDEX IF NOT EXISTS idx_participants_last_status ON participants(last_status);
        CREATE INDEX IF NOT EXISTS idx_messages_recipient ON messages(recipient);
        CREATE INDEX IF NOT EXISTS idx_messages_sender ON messages(sender);
        """,
    ),
]


class StoreError(Exception):
    """Infrastructure failure while talking to the store."""


class StoreUnavailableError(StoreError):
    """The store is not connected or the database cannot be opened."""


class DuplicateNameError(Exception):
    """A participant with the given name already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Participant {name!r} already exists")
        self.name = name


def resolve_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are used as is; relative paths are resolved against
    the project root (the directory containing ``chat_room_api``).
    """
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


class ChatStore:
    """Store client for the ``participants`` and ``messages`` tables."""

    def __init__(self, database_url: str) -> None:
        self.path = resolve_database_path(database_url)
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def connect(self) -> None:
        """Open the database and apply pending migrations."""
        self._connected = True
        try:
            with self._cursor() as cursor:
                cursor.execute(
                    "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
                )
                row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
                current_version = row["version"] if row and row["version"] is not None else 0
                for version, sql in MIGRATIONS:
                    if version > current_version:
                        cursor.executescript(sql)
                        cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                        current_version = version
        except StoreError:
            self._connected = False
            raise
        logger.info("Connected to the database at %s", self.path)

    def close(self) -> None:
        if self._connected:
            self._connected = False
            logger.info("Disconnected from the database")

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor on a fresh connection, committing on success.

        ``sqlite3`` errors are translated into ``StoreError`` (or
        ``DuplicateNameError`` for a violated name index) so callers
        never depend on the driver's exception hierarchy.
        """
        if not self._connected:
            raise StoreUnavailableError("Store is not connected")
        try:
            conn = sqlite3.connect(self.path)
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Cannot open database {self.path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn.cursor()
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StoreError(str(exc)) from exc
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------
    def insert_participant(self, name: str, last_status: int) -> int:
        """Insert a participant and return its identifier.

        Raises ``DuplicateNameError`` when the unique name index
        rejects the row.
        """
        try:
            with self._cursor() as cursor:
                cursor.execute(
                    "INSERT INTO participants (name, last_status) VALUES (?, ?)",
                    (name, last_status),
                )
                return cursor.lastrowid
        except StoreError as exc:
            if isinstance(exc.__cause__, sqlite3.IntegrityError):
                raise DuplicateNameError(name) from exc
            raise

    def find_participant(self, name: str) -> Optional[Dict[str, Any]]:
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT id, name, last_status FROM participants WHERE name = ?",
                (name,),
            ).fetchone()
            return dict(row) if row else None

    def list_participants(self) -> List[Dict[str, Any]]:
        with self._cursor() as cursor:
            rows = cursor.execute(
                "SELECT id, name, last_status FROM participants ORDER BY id"
            ).fetchall()
            return [dict(row) for row in rows]

    def update_last_status(self, participant_id: int, last_status: int) -> int:
        """Set the heartbeat time and return the number of rows touched."""
        with self._cursor() as cursor:
            cursor.execute(
                "UPDATE participants SET last_status = ? WHERE id = ?",
                (last_status, participant_id),
            )
            return cursor.rowcount

    def find_inactive_participants(self, cutoff: int) -> List[Dict[str, Any]]:
        """Return participants whose last heartbeat is strictly before ``cutoff``."""
        with self._cursor() as cursor:
            rows = cursor.execute(
                "SELECT id, name, last_status FROM participants WHERE last_status < ? ORDER BY id",
                (cutoff,),
            ).fetchall()
            return [dict(row) for row in rows]

    def delete_participant(self, participant_id: int) -> None:
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM participants WHERE id = ?", (participant_id,))

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------
    def insert_message(self, sender: str, recipient: str, text: str, type: str, time: str) -> int:
        with self._cursor() as cursor:
            cursor.execute(
                "INSERT INTO messages (sender, recipient, text, type, time) VALUES (?, ?, ?, ?, ?)",
                (sender, recipient, text, type, time),
            )
            return cursor.lastrowid

    def find_messages_visible_to(self, name: str, broadcast: str) -> List[Dict[str, Any]]:
        """Return, in insertion order, every message ``name`` may read."""
        with self._cursor() as cursor:
            rows = cursor.execute(
                """
                SELECT id, sender, recipient, text, type, time FROM messages
                WHERE recipient = ? OR recipient = ? OR sender = ?
                ORDER BY id
                """,
                (broadcast, name, name),
            ).fetchall()
            return [dict(row) for row in rows]

    def count_messages(self) -> int:
        with self._cursor() as cursor:
            row = cursor.execute("SELECT COUNT(*) AS count FROM messages").fetchone()
            return row["count"]
