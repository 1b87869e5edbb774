from __future__ import annotations

from typing import Protocol

from cares_chat.domain.entities.message import Message
from cares_chat.domain.value_objects.enums import ParticipantRole


class MessageReader(Protocol):
    async def list_conversation(
        self,
        student_id: int,
        counselor_id: int,
    ) -> list[Message]:
        """All messages of the pair, ascending by (created_at, id)."""
        ...


class MessageWriter(Protocol):
    async def append(
        self,
        student_id: int,
        counselor_id: int,
        sender_role: ParticipantRole,
        text: str,
    ) -> Message:
        """Insert a message; id and created_at are assigned by the store."""
        ...
