"""
Requester identity helpers.

Chat clients identify themselves with a plain ``User`` header carrying
their participant name; there are no passwords or tokens.  The
dependencies below resolve that header (and the services stored on
``app.state`` by the application factory) for the endpoints.
"""

from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, Request

from chat_room_api.app.schemas.participant import ParticipantRead
from chat_room_api.app.services.message_service import MessageService
from chat_room_api.app.services.participant_service import ParticipantService


def get_participant_service(request: Request) -> ParticipantService:
    return request.app.state.participant_service


def get_message_service(request: Request) -> MessageService:
    return request.app.state.message_service


def get_requester(user: Optional[str] = Header(None)) -> Optional[str]:
    """Return the name carried by the ``User`` header, or ``None``."""
    if user is None:
        return None
    user = user.strip()
    return user or None


def require_participant(status_code: int, detail: str) -> Callable[..., ParticipantRead]:
    """Dependency factory resolving the requester to a known participant.

    Endpoints disagree on how an unidentified caller is reported (the
    message log answers 403, the heartbeat answers 404), so the status
    code is chosen per route: ``Depends(require_participant(403, ...))``.
    A missing header and an unknown name are reported the same way.
    """

    async def _participant_dependency(
        requester: Optional[str] = Depends(get_requester),
        participants: ParticipantService = Depends(get_participant_service),
    ) -> ParticipantRead:
        if requester is None:
            raise HTTPException(status_code=status_code, detail=detail)
        participant = await participants.get_participant(requester)
        if participant is None:
            raise HTTPException(status_code=status_code, detail=detail)
        return participant

    return _participant_dependency
