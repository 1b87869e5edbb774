from __future__ import annotations

from typing import Protocol

from cares_chat.domain.entities.message import Message


class DeliveryRouter(Protocol):
    def dispatch(self, message: Message) -> None:
        """Best-effort push of an already committed message. Must not block."""
        ...
