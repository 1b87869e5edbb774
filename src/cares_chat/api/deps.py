"""FastAPI dependency injection helpers."""
from __future__ import annotations

from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Annotated, AsyncIterator, Callable

from fastapi import Depends
from fastapi.requests import HTTPConnection

from cares_chat.infrastructure.db.session import AsyncSessionLocal
from cares_chat.infrastructure.db.uow import SqlAlchemyUoW
from cares_chat.infrastructure.ws.delivery import WsDeliveryRouter
from cares_chat.infrastructure.ws.lifecycle import ConnectionLifecycleManager
from cares_chat.infrastructure.ws.registry import IdentityRegistry


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        try:
            yield uow
        finally:
            await session.close()


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]

UoWFactory = Callable[[], AbstractAsyncContextManager[SqlAlchemyUoW]]


@asynccontextmanager
async def open_uow() -> AsyncIterator[SqlAlchemyUoW]:
    """Fresh session per unit of work; rolls back if the block raises."""
    async with AsyncSessionLocal() as session:
        async with SqlAlchemyUoW(session) as uow:
            yield uow


def get_uow_factory() -> UoWFactory:
    return open_uow


UoWFactoryDep = Annotated[UoWFactory, Depends(get_uow_factory)]


def get_registry(conn: HTTPConnection) -> IdentityRegistry:
    return conn.app.state.registry


def get_delivery_router(conn: HTTPConnection) -> WsDeliveryRouter:
    return conn.app.state.delivery_router


RegistryDep = Annotated[IdentityRegistry, Depends(get_registry)]
DeliveryRouterDep = Annotated[WsDeliveryRouter, Depends(get_delivery_router)]


def get_lifecycle(conn: HTTPConnection) -> ConnectionLifecycleManager:
    return conn.app.state.lifecycle


LifecycleDep = Annotated[ConnectionLifecycleManager, Depends(get_lifecycle)]
