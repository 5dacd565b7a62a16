"""
Business logic for chat participants.

Joining inserts the participant and then announces it to the room.
The two writes are independent: if the announcement fails the
participant stays joined without a join message.  Name uniqueness is
enforced by the store's unique index, so concurrent joins with the
same name cannot both succeed.
"""

import logging
import time
from typing import Callable, List, Optional

from chat_room_api.app.core.db import ChatStore
from chat_room_api.app.schemas.participant import ParticipantRead
from chat_room_api.app.services.message_service import JOIN_TEXT, MessageService


def to_millis(timestamp: float) -> int:
    return int(timestamp * 1000)


class ParticipantService:
    """Service for joining, listing and refreshing participants."""

    def __init__(
        self,
        store: ChatStore,
        messages: MessageService,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._messages = messages
        self._clock = clock

    async def join(self, name: str) -> ParticipantRead:
        """Register ``name`` and announce it.

        Raises ``DuplicateNameError`` if the name is already taken; in
        that case nothing is written.
        """
        last_status = to_millis(self._clock())
        participant_id = self._store.insert_participant(name, last_status)
        logging.getLogger(__name__).info("Participant %s joined (id=%s)", name, participant_id)
        await self._messages.announce(name, JOIN_TEXT)
        return ParticipantRead(id=participant_id, name=name, last_status=last_status)

    async def list_participants(self) -> List[ParticipantRead]:
        return [self._to_read(row) for row in self._store.list_participants()]

    async def get_participant(self, name: str) -> Optional[ParticipantRead]:
        row = self._store.find_participant(name)
        return self._to_read(row) if row else None

    async def heartbeat(self, name: str) -> bool:
        """Refresh the liveness clock of ``name``.

        Returns ``False`` when no such participant exists, including
        when the sweeper removes it between the lookup and the update.
        """
        row = self._store.find_participant(name)
        if not row:
            return False
        return self._store.update_last_status(row["id"], to_millis(self._clock())) > 0

    @staticmethod
    def _to_read(row: dict) -> ParticipantRead:
        return ParticipantRead(id=row["id"], name=row["name"], last_status=row["last_status"])
