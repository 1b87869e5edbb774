"""Fire-and-forget push of stored messages to live connections."""
from __future__ import annotations

import asyncio
import logging

from cares_chat.domain.entities.message import Message
from cares_chat.domain.entities.participant import Participant
from cares_chat.infrastructure.ws.protocol import MESSAGE_CREATED, WsOutbound, message_payload
from cares_chat.infrastructure.ws.registry import IdentityRegistry

logger = logging.getLogger(__name__)


class WsDeliveryRouter:
    """Implements application.ports.delivery.DeliveryRouter.

    A push that fails or finds nobody connected is dropped; the recipient
    reads the message from history on its next connect.
    """

    def __init__(self, registry: IdentityRegistry, *, echo_to_sender: bool = True) -> None:
        self._registry = registry
        self._echo_to_sender = echo_to_sender
        self._tasks: set[asyncio.Task[None]] = set()

    def dispatch(self, message: Message) -> None:
        task = asyncio.create_task(self._deliver(message), name=f"deliver-{message.id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def aclose(self) -> None:
        """Wait for in-flight pushes (called on shutdown)."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _deliver(self, message: Message) -> None:
        raw = WsOutbound(type=MESSAGE_CREATED, data=message_payload(message)).model_dump_json()
        targets = [message.recipient]
        if self._echo_to_sender:
            targets.append(message.sender)
        for participant in targets:
            await self._push(participant, raw, message.id)

    async def _push(self, participant: Participant, raw: str, message_id: int) -> None:
        handle = await self._registry.lookup(participant)
        if handle is None:
            logger.debug("Message %d: %s offline, skipping push", message_id, participant.key)
            return
        try:
            await handle.send_text(raw)
        except Exception:
            logger.warning("Message %d: push to %s failed", message_id, participant.key, exc_info=True)
