"""
Pydantic schemas for chat messages.

Messages are exposed with the short wire names used by chat clients
(``from``, ``to``, ``text``, ``type``, ``time``).  ``from`` is a
Python keyword, so the sender lives in ``sender`` and is serialised
through an alias.
"""

from typing import Literal

from pydantic import BaseModel, Field, StrictStr, field_validator

# Kinds a participant may post; ``status`` is reserved for join/leave
# announcements generated by the server.
POSTABLE_TYPES = ("message", "private_message")


class MessageCreate(BaseModel):
    """Payload for posting a message.

    The sender is not part of the body: it is taken from the ``User``
    header of the request.
    """

    to: StrictStr = Field(..., examples=["Todos"])
    text: StrictStr = Field(..., examples=["hi"])
    type: Literal["message", "private_message"] = Field(..., examples=["message"])

    @field_validator("to", "text")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Field must not be empty")
        return v


class MessageRead(BaseModel):
    """Schema for reading a stored message."""

    id: int
    sender: str = Field(..., alias="from")
    to: str
    text: str
    type: str
    time: str

    model_config = {
        "populate_by_name": True,
    }
