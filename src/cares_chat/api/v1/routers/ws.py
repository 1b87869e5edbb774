from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PayloadError

from cares_chat.api.deps import DeliveryRouterDep, LifecycleDep, UoWFactory, UoWFactoryDep
from cares_chat.application.exceptions import AppError, NotFoundError, StorageError, ValidationError
from cares_chat.config import settings
from cares_chat.domain.entities.participant import Participant
from cares_chat.domain.value_objects.enums import ParticipantRole
from cares_chat.infrastructure.ws.delivery import WsDeliveryRouter
from cares_chat.infrastructure.ws.lifecycle import parse_handshake
from cares_chat.infrastructure.ws.protocol import (
    CounselorSendData,
    StudentSendData,
    WsInbound,
    WsOutbound,
)
from cares_chat.services import conversation_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

HANDSHAKE_REJECTED = 4400

_ERROR_CODES: dict[type[AppError], str] = {
    ValidationError: "invalid_data",
    NotFoundError: "not_found",
    StorageError: "send_failed",
}


@router.websocket("/ws/chat")
async def ws_chat(
    websocket: WebSocket,
    uow_factory: UoWFactoryDep,
    lifecycle: LifecycleDep,
    delivery: DeliveryRouterDep,
) -> None:
    try:
        participant = parse_handshake(
            websocket.query_params.get("studentId"),
            websocket.query_params.get("counselorId"),
        )
    except ValidationError as exc:
        logger.debug("WS handshake rejected: %s", exc.detail)
        await websocket.close(code=HANDSHAKE_REJECTED, reason=exc.detail)
        return

    await websocket.accept()
    await lifecycle.connect(participant, websocket)

    heartbeat_task = asyncio.create_task(
        _heartbeat(websocket), name=f"ws-heartbeat-{participant.key}",
    )
    try:
        await _read_loop(websocket, participant, uow_factory, delivery)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for %s", participant.key)
    finally:
        heartbeat_task.cancel()
        await lifecycle.disconnect(participant, websocket)


async def _heartbeat(ws: WebSocket) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await ws.send_text(WsOutbound(type="pong", data={}).model_dump_json())
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("Heartbeat stopped", exc_info=True)


async def _read_loop(
    ws: WebSocket,
    participant: Participant,
    uow_factory: UoWFactory,
    delivery: WsDeliveryRouter,
) -> None:
    while True:
        raw = await ws.receive_text()
        try:
            msg = WsInbound.model_validate_json(raw)
        except Exception:
            await _send_error(ws, "invalid_payload")
            continue

        if msg.type == "ping":
            await ws.send_text(WsOutbound(type="pong", data={}).model_dump_json())

        elif msg.type == "message.send":
            await _handle_send(ws, participant, msg.data, uow_factory, delivery)

        else:
            await _send_error(ws, "unknown_type", type=msg.type)


async def _handle_send(
    ws: WebSocket,
    participant: Participant,
    data: dict[str, Any],
    uow_factory: UoWFactory,
    delivery: WsDeliveryRouter,
) -> None:
    """Send to the peer named in ``data``; the sender is the connection's participant."""
    try:
        if participant.role is ParticipantRole.STUDENT:
            body = StudentSendData.model_validate(data)
            student_id, counselor_id = participant.id, body.counselor_id
        else:
            body = CounselorSendData.model_validate(data)
            student_id, counselor_id = body.student_id, participant.id
    except PayloadError as exc:
        detail = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        await _send_error(ws, "invalid_data", detail=detail)
        return

    try:
        async with uow_factory() as uow:
            await conversation_service.send_message(
                student_id, counselor_id, participant.role, body.text, uow, delivery,
            )
    except AppError as exc:
        await _send_error(ws, _ERROR_CODES.get(type(exc), "send_failed"), detail=exc.detail)


async def _send_error(ws: WebSocket, code: str, **extra: Any) -> None:
    await ws.send_text(WsOutbound(type="error", data={"code": code, **extra}).model_dump_json())
