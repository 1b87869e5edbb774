from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from cares_chat.domain.entities.participant import Participant
from cares_chat.domain.value_objects.enums import ParticipantRole
from cares_chat.domain.value_objects.ids import CounselorId, MessageId, StudentId


@dataclass(frozen=True, slots=True)
class Message:
    id: MessageId
    student_id: StudentId
    counselor_id: CounselorId
    sender_role: ParticipantRole
    text: str
    created_at: datetime

    @property
    def sender(self) -> Participant:
        return self._side(self.sender_role)

    @property
    def recipient(self) -> Participant:
        return self._side(self.sender_role.opposite)

    def _side(self, role: ParticipantRole) -> Participant:
        if role is ParticipantRole.STUDENT:
            return Participant(id=self.student_id, role=role)
        return Participant(id=self.counselor_id, role=role)
