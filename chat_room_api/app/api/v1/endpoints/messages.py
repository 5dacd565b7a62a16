"""
Message endpoints.

``POST /messages`` appends a public or private message on behalf of
the participant named in the ``User`` header.  ``GET /messages``
returns the messages that participant is allowed to see, optionally
truncated to the most recent ``limit`` entries.
"""

import re
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from pydantic import ValidationError

from chat_room_api.app.core.security import (
    get_message_service,
    get_participant_service,
    get_requester,
    require_participant,
)
from chat_room_api.app.schemas.message import POSTABLE_TYPES, MessageCreate, MessageRead
from chat_room_api.app.schemas.participant import ParticipantRead
from chat_room_api.app.services.message_service import MessageService
from chat_room_api.app.services.participant_service import ParticipantService


router = APIRouter()

LIMIT_PATTERN = re.compile(r"^[1-9]\d*$")


@router.post("", status_code=status.HTTP_201_CREATED, response_class=Response)
async def post_message(
    body: Dict[str, Any] = Body(...),
    requester: Optional[str] = Depends(get_requester),
    participants: ParticipantService = Depends(get_participant_service),
    messages: MessageService = Depends(get_message_service),
) -> Response:
    """Post a message.

    The body must contain ``to``, ``text`` and ``type``.  Checks run
    in order: the type must be ``message`` or ``private_message``, the
    ``User`` header must be present, the body must pass the schema and
    the sender must be a participant.  Every failure is a 422 and
    nothing is written.
    """
    if body.get("type") not in POSTABLE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="type must be one of: " + ", ".join(POSTABLE_TYPES),
        )
    if requester is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Missing User header")
    try:
        data = MessageCreate.model_validate(body)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        )
    if await participants.get_participant(requester) is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Unknown sender")

    await messages.post_message(requester, data)
    return Response(status_code=status.HTTP_201_CREATED)


@router.get("", response_model=List[MessageRead])
async def list_messages(
    limit: Optional[str] = Query(None, description="Return only the last N visible messages"),
    participant: ParticipantRead = Depends(require_participant(status.HTTP_403_FORBIDDEN, "Unknown user")),
    messages: MessageService = Depends(get_message_service),
) -> List[MessageRead]:
    """List messages visible to the requester.

    A message is visible when it is addressed to everybody, addressed
    to the requester, or sent by the requester.  ``limit`` must be a
    positive integer when given; the most recent ``limit`` messages are kept.
    """
    count: Optional[int] = None
    # An empty ``?limit=`` counts as no limit.
    if limit:
        if not LIMIT_PATTERN.match(limit):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="limit must be a positive integer",
            )
        count = int(limit)
    return await messages.list_visible(participant.name, count)
