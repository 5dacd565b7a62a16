"""
Service layer for chat messages.

Messages are append-only.  Participants post ``message`` (public) and
``private_message`` entries; the service itself writes ``status``
entries when somebody joins or leaves the room.  Reading is filtered
per requester: a message is visible when it is addressed to everybody,
to the requester, or was sent by the requester.
"""

import logging
import time
from typing import Callable, List, Optional

from chat_room_api.app.core.db import ChatStore
from chat_room_api.app.schemas.message import MessageCreate, MessageRead

# Recipient meaning "every participant in the room".
BROADCAST_RECIPIENT = "Todos"
STATUS_TYPE = "status"
JOIN_TEXT = "joins"
LEAVE_TEXT = "leaves"

TIME_FORMAT = "%H:%M:%S"


def format_time(timestamp: float) -> str:
    """Format an epoch timestamp as a local ``HH:MM:SS`` string."""
    return time.strftime(TIME_FORMAT, time.localtime(timestamp))


class MessageService:
    """Service for posting, announcing and reading chat messages."""

    def __init__(self, store: ChatStore, clock: Callable[[], float] = time.time) -> None:
        self._store = store
        self._clock = clock

    async def post_message(self, sender: str, data: MessageCreate) -> MessageRead:
        """Append a message from ``sender``.

        The caller is responsible for checking that ``sender`` is a
        known participant.
        """
        return self._insert(sender, data.to, data.text, data.type)

    async def announce(self, name: str, text: str) -> MessageRead:
        """Append a ``status`` message about ``name`` addressed to everybody."""
        message = self._insert(name, BROADCAST_RECIPIENT, text, STATUS_TYPE)
        logging.getLogger(__name__).info("Participant %s %s", name, text)
        return message

    async def list_visible(self, requester: str, limit: Optional[int] = None) -> List[MessageRead]:
        """Return the messages ``requester`` may read, oldest first.

        When ``limit`` is given only the ``limit`` most recent visible
        messages are returned, still in insertion order.
        """
        rows = self._store.find_messages_visible_to(requester, BROADCAST_RECIPIENT)
        if limit is not None:
            rows = rows[-limit:]
        return [self._to_read(row) for row in rows]

    def _insert(self, sender: str, recipient: str, text: str, type: str) -> MessageRead:
        stamp = format_time(self._clock())
        message_id = self._store.insert_message(sender, recipient, text, type, stamp)
        return MessageRead(id=message_id, sender=sender, to=recipient, text=text, type=type, time=stamp)

    @staticmethod
    def _to_read(row: dict) -> MessageRead:
        return MessageRead(
            id=row["id"],
            sender=row["sender"],
            to=row["recipient"],
            text=row["text"],
            type=row["type"],
            time=row["time"],
        )
