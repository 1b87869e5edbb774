"""Versioned schema contract, checked once at startup."""
from __future__ import annotations

import logging

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from cares_chat.application.exceptions import SchemaVersionError, StorageError
from cares_chat.infrastructure.db.base import Base
from cares_chat.infrastructure.db.models import SchemaVersionModel

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


async def current_version(engine: AsyncEngine) -> int | None:
    stmt = select(SchemaVersionModel.version).order_by(SchemaVersionModel.version.desc()).limit(1)
    try:
        async with engine.connect() as conn:
            result = await conn.execute(stmt)
            return result.scalar_one_or_none()
    except SQLAlchemyError as exc:
        raise StorageError(f"Cannot read schema version: {exc}") from exc


async def ensure_schema(engine: AsyncEngine) -> None:
    """Create missing tables and stamp SCHEMA_VERSION (development bootstrap)."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            result = await conn.execute(
                select(SchemaVersionModel.version).where(SchemaVersionModel.version == SCHEMA_VERSION)
            )
            if result.scalar_one_or_none() is None:
                await conn.execute(insert(SchemaVersionModel).values(version=SCHEMA_VERSION))
                logger.info("Stamped schema version %d", SCHEMA_VERSION)
    except SQLAlchemyError as exc:
        raise StorageError(f"Cannot create schema: {exc}") from exc


async def verify_schema(engine: AsyncEngine) -> None:
    found = await current_version(engine)
    if found != SCHEMA_VERSION:
        raise SchemaVersionError(
            f"Database schema version is {found}, expected {SCHEMA_VERSION}"
        )
    logger.info("Database schema version %d verified", found)
