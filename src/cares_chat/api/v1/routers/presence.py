from __future__ import annotations

from fastapi import APIRouter

from cares_chat.api.deps import RegistryDep
from cares_chat.api.v1.schemas.presence import PresenceResponse

router = APIRouter(prefix="/api/v1", tags=["presence"])


@router.get("/presence", response_model=PresenceResponse)
async def get_presence(registry: RegistryDep) -> PresenceResponse:
    snapshot = await registry.snapshot()
    return PresenceResponse(**snapshot.to_payload())
