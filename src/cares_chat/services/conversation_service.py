from __future__ import annotations

import logging

from cares_chat.application.exceptions import NotFoundError, ValidationError
from cares_chat.application.ports.delivery import DeliveryRouter
from cares_chat.application.uow import UnitOfWork
from cares_chat.domain.entities.message import Message
from cares_chat.domain.value_objects.enums import ParticipantRole

logger = logging.getLogger(__name__)


def _validate_pair(student_id: int, counselor_id: int) -> None:
    if student_id <= 0:
        raise ValidationError(f"Invalid student id: {student_id}")
    if counselor_id <= 0:
        raise ValidationError(f"Invalid counselor id: {counselor_id}")


async def send_message(
    student_id: int,
    counselor_id: int,
    sender_role: ParticipantRole,
    text: str,
    uow: UnitOfWork,
    router: DeliveryRouter,
) -> Message:
    """Persist a message, then hand it to the router for live delivery.

    The stored message is returned whatever happens to the push; a send
    only fails if validation or the store does.
    """
    _validate_pair(student_id, counselor_id)
    if not text or not text.strip():
        raise ValidationError("Message text must not be empty")

    if not await uow.accounts.exists(ParticipantRole.COUNSELOR, counselor_id):
        raise NotFoundError(f"Counselor {counselor_id} not found")
    if not await uow.accounts.exists(ParticipantRole.STUDENT, student_id):
        raise NotFoundError(f"Student {student_id} not found")

    message = await uow.messages_w.append(student_id, counselor_id, sender_role, text)
    await uow.commit()
    logger.info(
        "Stored message %d (%s, student=%d, counselor=%d)",
        message.id, sender_role, student_id, counselor_id,
    )

    router.dispatch(message)
    return message


async def history(
    student_id: int,
    counselor_id: int,
    uow: UnitOfWork,
) -> list[Message]:
    _validate_pair(student_id, counselor_id)
    return await uow.messages.list_conversation(student_id, counselor_id)
