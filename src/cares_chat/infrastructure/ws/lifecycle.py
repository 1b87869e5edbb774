"""Connection handshake / disconnect protocol and presence broadcasts."""
from __future__ import annotations

import asyncio
import logging

from cares_chat.application.exceptions import ValidationError
from cares_chat.application.ports.connection import ConnectionHandle
from cares_chat.domain.entities.participant import Participant
from cares_chat.domain.value_objects.enums import ParticipantRole
from cares_chat.infrastructure.ws.protocol import PRESENCE, WsOutbound
from cares_chat.infrastructure.ws.registry import IdentityRegistry

logger = logging.getLogger(__name__)


def _parse_id(raw: int | str | None, role: ParticipantRole) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {role} id: {raw!r}") from None
    if value <= 0:
        raise ValidationError(f"Invalid {role} id: {raw!r}")
    return value


def parse_handshake(
    student_id: int | str | None,
    counselor_id: int | str | None,
) -> Participant:
    """Resolve the connecting participant; exactly one id must be supplied."""
    if (student_id is None) == (counselor_id is None):
        raise ValidationError("Exactly one of studentId or counselorId is required")
    if student_id is not None:
        role = ParticipantRole.STUDENT
        return Participant(id=_parse_id(student_id, role), role=role)
    else:
        role = ParticipantRole.COUNSELOR
        return Participant(id=_parse_id(counselor_id, role), role=role)


class ConnectionLifecycleManager:
    def __init__(self, registry: IdentityRegistry) -> None:
        self._registry = registry

    async def connect(self, participant: Participant, handle: ConnectionHandle) -> None:
        await self._registry.register(participant, handle)
        logger.info("Connected: %s", participant.key)
        await self.broadcast_presence()

    async def disconnect(self, participant: Participant, handle: ConnectionHandle) -> None:
        removed = await self._registry.unregister(participant, handle)
        logger.info("Disconnected: %s", participant.key)
        if removed:
            await self.broadcast_presence()

    async def broadcast_presence(self) -> None:
        """Send the current snapshot to every connected handle."""
        snapshot, handles = await self._registry.presence()
        raw = WsOutbound(type=PRESENCE, data=snapshot.to_payload()).model_dump_json()
        results = await asyncio.gather(
            *(h.send_text(raw) for h in handles),
            return_exceptions=True,
        )
        failed = sum(1 for r in results if isinstance(r, Exception))
        if failed:
            logger.debug("Presence broadcast failed for %d of %d connections", failed, len(handles))
