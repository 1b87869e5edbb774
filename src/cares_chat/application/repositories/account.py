from __future__ import annotations

from typing import Protocol

from cares_chat.domain.value_objects.enums import ParticipantRole


class AccountReader(Protocol):
    """Read-only view of the student/counselor accounts owned elsewhere."""

    async def exists(self, role: ParticipantRole, participant_id: int) -> bool: ...
