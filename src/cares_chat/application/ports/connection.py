from __future__ import annotations

from typing import Protocol


class ConnectionHandle(Protocol):
    """Live outbound channel to one connected participant (e.g. a WebSocket)."""

    async def send_text(self, data: str) -> None: ...
