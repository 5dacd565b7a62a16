"""
Heartbeat endpoint.

Clients call ``POST /status`` periodically to stay in the room; a
participant that stays silent longer than the inactivity timeout is
removed by the liveness sweeper.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from chat_room_api.app.core.security import get_participant_service, get_requester
from chat_room_api.app.services.participant_service import ParticipantService


router = APIRouter()


@router.post("", response_class=Response)
async def heartbeat(
    requester: Optional[str] = Depends(get_requester),
    participants: ParticipantService = Depends(get_participant_service),
) -> Response:
    """Refresh the requester's liveness clock; 404 if missing or unknown."""
    if requester is None or not await participants.heartbeat(requester):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown user")
    return Response(status_code=status.HTTP_200_OK)
