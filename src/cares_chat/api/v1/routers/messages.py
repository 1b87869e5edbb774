from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Path

from cares_chat.api.deps import DeliveryRouterDep, UoWDep
from cares_chat.api.v1.schemas.message import MessageResponse, SendMessageRequest
from cares_chat.application.uow import UnitOfWork
from cares_chat.domain.value_objects.enums import ParticipantRole
from cares_chat.services import conversation_service

router = APIRouter(prefix="/api/v1", tags=["messages"])

StudentId = Annotated[int, Path(alias="studentId", gt=0)]
CounselorId = Annotated[int, Path(alias="counselorId", gt=0)]


@router.post(
    "/students/{studentId}/counselors/{counselorId}/messages",
    response_model=MessageResponse,
    status_code=201,
)
async def send_as_student(
    body: SendMessageRequest,
    uow: UoWDep,
    delivery: DeliveryRouterDep,
    student_id: StudentId,
    counselor_id: CounselorId,
) -> MessageResponse:
    msg = await conversation_service.send_message(
        student_id, counselor_id, ParticipantRole.STUDENT, body.text, uow, delivery,
    )
    return MessageResponse.model_validate(msg)


@router.post(
    "/counselors/{counselorId}/students/{studentId}/messages",
    response_model=MessageResponse,
    status_code=201,
)
async def send_as_counselor(
    body: SendMessageRequest,
    uow: UoWDep,
    delivery: DeliveryRouterDep,
    student_id: StudentId,
    counselor_id: CounselorId,
) -> MessageResponse:
    msg = await conversation_service.send_message(
        student_id, counselor_id, ParticipantRole.COUNSELOR, body.text, uow, delivery,
    )
    return MessageResponse.model_validate(msg)


@router.get(
    "/students/{studentId}/counselors/{counselorId}/messages",
    response_model=list[MessageResponse],
)
async def list_as_student(
    uow: UoWDep,
    student_id: StudentId,
    counselor_id: CounselorId,
) -> list[MessageResponse]:
    return await _history(student_id, counselor_id, uow)


@router.get(
    "/counselors/{counselorId}/students/{studentId}/messages",
    response_model=list[MessageResponse],
)
async def list_as_counselor(
    uow: UoWDep,
    student_id: StudentId,
    counselor_id: CounselorId,
) -> list[MessageResponse]:
    return await _history(student_id, counselor_id, uow)


async def _history(student_id: int, counselor_id: int, uow: UnitOfWork) -> list[MessageResponse]:
    messages = await conversation_service.history(student_id, counselor_id, uow)
    return [MessageResponse.model_validate(m) for m in messages]
