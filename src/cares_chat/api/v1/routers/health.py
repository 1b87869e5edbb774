from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from cares_chat.infrastructure.db.schema import SCHEMA_VERSION, current_version
from cares_chat.infrastructure.db.session import AsyncSessionLocal, engine

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz() -> JSONResponse:
    errors: list[str] = []

    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        version = await current_version(engine)
        if version != SCHEMA_VERSION:
            errors.append(f"schema: version {version}, expected {SCHEMA_VERSION}")
    except Exception as exc:  # noqa: BLE001
        errors.append(f"postgres: {exc}")

    if errors:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "errors": errors},
        )
    return JSONResponse(content={"status": "ready"})
