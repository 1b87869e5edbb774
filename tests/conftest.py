"""Shared test fixtures."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import pytest

from cares_chat.application.exceptions import StorageError
from cares_chat.domain.entities.message import Message
from cares_chat.domain.entities.participant import Participant
from cares_chat.domain.value_objects.enums import ParticipantRole
from cares_chat.domain.value_objects.ids import CounselorId, MessageId, StudentId

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def student() -> Participant:
    return Participant(id=7, role=ParticipantRole.STUDENT)


@pytest.fixture
def counselor() -> Participant:
    return Participant(id=3, role=ParticipantRole.COUNSELOR)


def make_message(
    *,
    message_id: int = 1,
    student_id: int = 7,
    counselor_id: int = 3,
    sender_role: ParticipantRole = ParticipantRole.STUDENT,
    text: str = "hello",
) -> Message:
    return Message(
        id=MessageId(message_id),
        student_id=StudentId(student_id),
        counselor_id=CounselorId(counselor_id),
        sender_role=sender_role,
        text=text,
        created_at=_EPOCH,
    )


@dataclass(eq=False)
class FakeHandle:
    """Stands in for a WebSocket; records every frame sent to it."""

    sent: list[str] = field(default_factory=list)
    fail: bool = False

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise ConnectionError("socket closed")
        self.sent.append(data)


@dataclass
class RecordingRouter:
    dispatched: list[Message] = field(default_factory=list)

    def dispatch(self, message: Message) -> None:
        self.dispatched.append(message)


@dataclass
class FakeAccountReader:
    students: set[int] = field(default_factory=lambda: {7})
    counselors: set[int] = field(default_factory=lambda: {3})

    async def exists(self, role: ParticipantRole, participant_id: int) -> bool:
        if role is ParticipantRole.STUDENT:
            return participant_id in self.students
        return participant_id in self.counselors


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def list_conversation(self, student_id: int, counselor_id: int) -> list[Message]:
        found = [
            m for m in self._messages
            if m.student_id == student_id and m.counselor_id == counselor_id
        ]
        return sorted(found, key=lambda m: (m.created_at, m.id))


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    fail: bool = False
    _next_id: int = 1

    async def append(
        self,
        student_id: int,
        counselor_id: int,
        sender_role: ParticipantRole,
        text: str,
    ) -> Message:
        if self.fail:
            raise StorageError("Failed to store message")
        message = Message(
            id=MessageId(self._next_id),
            student_id=StudentId(student_id),
            counselor_id=CounselorId(counselor_id),
            sender_role=sender_role,
            text=text,
            created_at=_EPOCH + timedelta(seconds=self._next_id),
        )
        self._next_id += 1
        self._reader._messages.append(message)
        return message


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    accounts: FakeAccountReader = field(default_factory=FakeAccountReader)
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    _committed: bool = False
    _rolled_back: bool = False

    def __post_init__(self) -> None:
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        self._rolled_back = True
