from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cares_chat.domain.value_objects.enums import ParticipantRole


class SendMessageRequest(BaseModel):
    text: str = Field(min_length=1)


class MessageResponse(BaseModel):
    id: int
    student_id: int
    counselor_id: int
    sender_role: ParticipantRole
    text: str
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
