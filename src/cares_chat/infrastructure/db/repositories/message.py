from __future__ import annotations

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cares_chat.application.exceptions import StorageError
from cares_chat.domain.entities.message import Message
from cares_chat.domain.value_objects.enums import ParticipantRole
from cares_chat.infrastructure.db.mappers import message as mapper
from cares_chat.infrastructure.db.models.message import MessageModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_conversation(
        self,
        student_id: int,
        counselor_id: int,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(
                MessageModel.student_id == student_id,
                MessageModel.counselor_id == counselor_id,
            )
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to read messages") from exc
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(
        self,
        student_id: int,
        counselor_id: int,
        sender_role: ParticipantRole,
        text: str,
    ) -> Message:
        """Insert one row; id and created_at come back from the database."""
        stmt = (
            insert(MessageModel)
            .values(
                student_id=student_id,
                counselor_id=counselor_id,
                sender_role=sender_role.value,
                text=text,
            )
            .returning(MessageModel)
        )
        try:
            result = await self._session.execute(stmt)
            row = result.scalar_one()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to store message") from exc
        return mapper.model_to_entity(row)
