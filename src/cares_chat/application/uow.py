from __future__ import annotations

from typing import Protocol

from cares_chat.application.repositories.account import AccountReader
from cares_chat.application.repositories.message import MessageReader, MessageWriter


class UnitOfWork(Protocol):
    accounts: AccountReader
    messages: MessageReader
    messages_w: MessageWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
