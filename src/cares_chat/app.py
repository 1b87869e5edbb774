from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cares_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from cares_chat.api.middleware.timing import RequestTimingMiddleware
from cares_chat.api.v1.routers import health, messages, presence, ws
from cares_chat.application.exceptions import (
    NotFoundError,
    StorageError,
    ValidationError,
)
from cares_chat.config import settings
from cares_chat.infrastructure.db import schema
from cares_chat.infrastructure.db.session import engine
from cares_chat.infrastructure.ws.delivery import WsDeliveryRouter
from cares_chat.infrastructure.ws.lifecycle import ConnectionLifecycleManager
from cares_chat.infrastructure.ws.registry import IdentityRegistry

logger = logging.getLogger(__name__)


async def _prepare_database() -> None:
    if settings.DB_CREATE_SCHEMA:
        await schema.ensure_schema(engine)
    if settings.DB_VERIFY_SCHEMA:
        await schema.verify_schema(engine)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    await _prepare_database()

    registry = IdentityRegistry()
    app.state.registry = registry
    app.state.delivery_router = WsDeliveryRouter(
        registry, echo_to_sender=settings.WS_ECHO_TO_SENDER,
    )
    app.state.lifecycle = ConnectionLifecycleManager(registry)
    logger.info("Presence registry and delivery router ready")

    yield

    await app.state.delivery_router.aclose()
    await engine.dispose()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Cares Chat Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(messages.router)
    app.include_router(presence.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(StorageError)
    async def _storage(_req: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure: %s", exc.detail, exc_info=exc)
        return JSONResponse(status_code=503, content={"detail": "Message store unavailable"})
