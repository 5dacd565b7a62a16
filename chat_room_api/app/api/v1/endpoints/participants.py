"""
Participant endpoints.

``POST /participants`` joins the room under a unique display name and
``GET /participants`` lists everybody currently in the room.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from chat_room_api.app.core.db import DuplicateNameError
from chat_room_api.app.core.security import get_participant_service
from chat_room_api.app.schemas.participant import ParticipantCreate, ParticipantRead
from chat_room_api.app.services.participant_service import ParticipantService


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_class=Response)
async def join(
    data: ParticipantCreate,
    participants: ParticipantService = Depends(get_participant_service),
) -> Response:
    """Join the room.

    Invalid names are rejected with 422 by schema validation; a name
    that is already taken yields 409.  On success a ``status`` message
    announcing the join is appended and an empty 201 is returned.
    """
    try:
        await participants.join(data.name)
    except DuplicateNameError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Name already in use")
    return Response(status_code=status.HTTP_201_CREATED)


@router.get("", response_model=List[ParticipantRead])
async def list_participants(
    participants: ParticipantService = Depends(get_participant_service),
) -> List[ParticipantRead]:
    return await participants.list_participants()
