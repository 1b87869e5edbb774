"""WebSocket message envelope models."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic.alias_generators import to_camel

from cares_chat.domain.entities.message import Message

PRESENCE = "presence"
MESSAGE_CREATED = "message.created"


class WsInbound(BaseModel):
    """Client → Server."""

    type: str  # message.send | ping
    data: dict[str, Any] = {}


class WsOutbound(BaseModel):
    """Server → Client."""

    type: str  # presence | message.created | error | pong
    data: dict[str, Any] = {}


class _SendData(BaseModel):
    """Body of a ``message.send`` frame; no coercion of ids or text."""

    text: StrictStr = Field(min_length=1)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StudentSendData(_SendData):
    counselor_id: StrictInt = Field(gt=0)


class CounselorSendData(_SendData):
    student_id: StrictInt = Field(gt=0)


def message_payload(message: Message) -> dict[str, Any]:
    return {
        "id": message.id,
        "studentId": message.student_id,
        "counselorId": message.counselor_id,
        "senderRole": message.sender_role.value,
        "text": message.text,
        "createdAt": message.created_at.isoformat(),
    }
