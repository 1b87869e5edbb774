from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cares_chat.application.exceptions import StorageError
from cares_chat.domain.value_objects.enums import ParticipantRole
from cares_chat.infrastructure.db.models.account import CounselorModel, StudentModel

_MODELS: dict[ParticipantRole, type[StudentModel] | type[CounselorModel]] = {
    ParticipantRole.STUDENT: StudentModel,
    ParticipantRole.COUNSELOR: CounselorModel,
}


class AccountReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def exists(self, role: ParticipantRole, participant_id: int) -> bool:
        model = _MODELS[role]
        stmt = select(model.id).where(model.id == participant_id).limit(1)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to look up {role} {participant_id}") from exc
        return result.scalar_one_or_none() is not None
