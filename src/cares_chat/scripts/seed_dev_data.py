"""Seed development data: sample students, counselors and one conversation."""
from __future__ import annotations

import asyncio
import logging

from sqlalchemy.dialects.postgresql import insert as pg_insert

from cares_chat.application.uow import UnitOfWork
from cares_chat.domain.value_objects.enums import ParticipantRole
from cares_chat.infrastructure.db import schema
from cares_chat.infrastructure.db.models.account import CounselorModel, StudentModel
from cares_chat.infrastructure.db.session import AsyncSessionLocal, engine
from cares_chat.infrastructure.db.uow import SqlAlchemyUoW

logger = logging.getLogger(__name__)

STUDENTS = [
    {"id": 7, "name": "Student Seven", "email": "student7@example.edu"},
    {"id": 8, "name": "Student Eight", "email": "student8@example.edu"},
]
COUNSELORS = [
    {"id": 3, "name": "Counselor Three", "email": "counselor3@example.edu"},
]
SAMPLE_CONVERSATION = [
    (ParticipantRole.STUDENT, "hello"),
    (ParticipantRole.COUNSELOR, "hi, how can I help?"),
]


async def seed_conversation(uow: UnitOfWork, student_id: int = 7, counselor_id: int = 3) -> int:
    """Append the sample conversation unless the pair already has history."""
    if await uow.messages.list_conversation(student_id, counselor_id):
        return 0
    for sender_role, text in SAMPLE_CONVERSATION:
        await uow.messages_w.append(student_id, counselor_id, sender_role, text)
    return len(SAMPLE_CONVERSATION)


async def seed() -> None:
    await schema.ensure_schema(engine)

    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        await session.execute(pg_insert(StudentModel).values(STUDENTS).on_conflict_do_nothing())
        await session.execute(pg_insert(CounselorModel).values(COUNSELORS).on_conflict_do_nothing())

        added = await seed_conversation(uow)

        await uow.commit()
        logger.info(
            "Seeded %d students, %d counselors, %d messages",
            len(STUDENTS), len(COUNSELORS), added,
        )

    await engine.dispose()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
