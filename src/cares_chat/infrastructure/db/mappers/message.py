from __future__ import annotations

from cares_chat.domain.entities.message import Message
from cares_chat.domain.value_objects.enums import ParticipantRole
from cares_chat.domain.value_objects.ids import CounselorId, MessageId, StudentId
from cares_chat.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=MessageId(model.id),
        student_id=StudentId(model.student_id),
        counselor_id=CounselorId(model.counselor_id),
        sender_role=ParticipantRole(model.sender_role),
        text=model.text,
        created_at=model.created_at,
    )
