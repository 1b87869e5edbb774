from __future__ import annotations

from enum import StrEnum


class ParticipantRole(StrEnum):
    STUDENT = "student"
    COUNSELOR = "counselor"

    @property
    def opposite(self) -> ParticipantRole:
        if self is ParticipantRole.STUDENT:
            return ParticipantRole.COUNSELOR
        return ParticipantRole.STUDENT
