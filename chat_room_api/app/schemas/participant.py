"""
Pydantic schemas for chat participants.

A participant is identified by its display name, which must be unique
across the room.  ``lastStatus`` holds the time of the latest
heartbeat in epoch milliseconds.
"""

from pydantic import BaseModel, Field, StrictStr, field_validator


class ParticipantCreate(BaseModel):
    """Payload for joining the room."""

    name: StrictStr = Field(..., examples=["alice"])

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v


class ParticipantRead(BaseModel):
    """Schema for reading a participant from the API."""

    id: int
    name: str
    last_status: int = Field(..., alias="lastStatus")

    model_config = {
        "populate_by_name": True,
    }
