"""In-process registry of live connections, one per participant."""
from __future__ import annotations

import asyncio
import logging

from cares_chat.application.dto.presence import PresenceSnapshot
from cares_chat.application.ports.connection import ConnectionHandle
from cares_chat.domain.entities.participant import Participant
from cares_chat.domain.value_objects.enums import ParticipantRole

logger = logging.getLogger(__name__)


class IdentityRegistry:
    """Maps each participant to its single active connection handle.

    Every operation runs under one lock, so a snapshot never sees a
    half-applied register/unregister.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._entries: dict[Participant, ConnectionHandle] = {}

    async def register(
        self,
        participant: Participant,
        handle: ConnectionHandle,
    ) -> ConnectionHandle | None:
        """Store ``handle`` for ``participant``, returning the handle it replaced."""
        async with self._lock:
            previous = self._entries.get(participant)
            self._entries[participant] = handle
        if previous is not None and previous is not handle:
            logger.info("Replaced stale connection for %s", participant.key)
        return previous

    async def unregister(
        self,
        participant: Participant,
        handle: ConnectionHandle | None = None,
    ) -> bool:
        """Drop the entry for ``participant``; absent entries are ignored.

        With ``handle`` set, the entry is only dropped while it still points
        at that handle.
        """
        async with self._lock:
            current = self._entries.get(participant)
            if current is None:
                return False
            if handle is not None and current is not handle:
                return False
            del self._entries[participant]
            return True

    async def lookup(self, participant: Participant) -> ConnectionHandle | None:
        async with self._lock:
            return self._entries.get(participant)

    async def snapshot(self) -> PresenceSnapshot:
        async with self._lock:
            return self._snapshot()

    async def handles(self) -> list[ConnectionHandle]:
        async with self._lock:
            return list(self._entries.values())

    async def presence(self) -> tuple[PresenceSnapshot, list[ConnectionHandle]]:
        """Snapshot and handles taken together, for presence broadcasts."""
        async with self._lock:
            return self._snapshot(), list(self._entries.values())

    def _snapshot(self) -> PresenceSnapshot:
        students = frozenset(p.id for p in self._entries if p.role is ParticipantRole.STUDENT)
        counselors = frozenset(p.id for p in self._entries if p.role is ParticipantRole.COUNSELOR)
        return PresenceSnapshot(students=students, counselors=counselors)
