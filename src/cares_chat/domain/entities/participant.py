from __future__ import annotations

from dataclasses import dataclass

from cares_chat.domain.value_objects.enums import ParticipantRole


@dataclass(frozen=True, slots=True)
class Participant:
    """A student or counselor; identity is the (role, id) pair."""

    id: int
    role: ParticipantRole

    @property
    def key(self) -> str:
        return f"{self.role}:{self.id}"
