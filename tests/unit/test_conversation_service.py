from __future__ import annotations

import pytest

from cares_chat.application.exceptions import NotFoundError, StorageError, ValidationError
from cares_chat.domain.value_objects.enums import ParticipantRole
from cares_chat.services import conversation_service
from tests.conftest import FakeUoW, RecordingRouter


@pytest.mark.asyncio
async def test_send_then_history_round_trip():
    uow, router = FakeUoW(), RecordingRouter()

    first = await conversation_service.send_message(
        7, 3, ParticipantRole.STUDENT, "hello", uow, router,
    )
    second = await conversation_service.send_message(
        7, 3, ParticipantRole.COUNSELOR, "hi", uow, router,
    )
    history = await conversation_service.history(7, 3, uow)

    assert first.id == 1
    assert first.sender_role is ParticipantRole.STUDENT
    assert [m.text for m in history] == ["hello", "hi"]
    assert [m.id for m in history] == [first.id, second.id]
    assert history[0].created_at <= history[1].created_at
    assert uow._committed is True


@pytest.mark.asyncio
async def test_send_dispatches_after_store():
    uow, router = FakeUoW(), RecordingRouter()

    msg = await conversation_service.send_message(
        7, 3, ParticipantRole.STUDENT, "hello", uow, router,
    )

    assert router.dispatched == [msg]


@pytest.mark.asyncio
async def test_history_only_contains_the_pair():
    uow, router = FakeUoW(), RecordingRouter()
    uow.accounts.students.add(8)

    await conversation_service.send_message(7, 3, ParticipantRole.STUDENT, "a", uow, router)
    await conversation_service.send_message(8, 3, ParticipantRole.STUDENT, "b", uow, router)

    history = await conversation_service.history(7, 3, uow)
    assert [m.text for m in history] == ["a"]


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   "])
async def test_send_rejects_empty_text(text):
    uow, router = FakeUoW(), RecordingRouter()

    with pytest.raises(ValidationError):
        await conversation_service.send_message(
            7, 3, ParticipantRole.STUDENT, text, uow, router,
        )

    assert uow.messages._messages == []
    assert router.dispatched == []


@pytest.mark.asyncio
async def test_send_rejects_malformed_ids():
    uow, router = FakeUoW(), RecordingRouter()

    with pytest.raises(ValidationError):
        await conversation_service.send_message(
            0, 3, ParticipantRole.STUDENT, "hello", uow, router,
        )


@pytest.mark.asyncio
async def test_send_to_unknown_counselor():
    uow, router = FakeUoW(), RecordingRouter()

    with pytest.raises(NotFoundError):
        await conversation_service.send_message(
            7, 99, ParticipantRole.STUDENT, "hello", uow, router,
        )

    assert uow.messages._messages == []


@pytest.mark.asyncio
async def test_send_from_unknown_student():
    uow, router = FakeUoW(), RecordingRouter()

    with pytest.raises(NotFoundError):
        await conversation_service.send_message(
            99, 3, ParticipantRole.STUDENT, "hello", uow, router,
        )


@pytest.mark.asyncio
async def test_storage_failure_skips_dispatch():
    uow, router = FakeUoW(), RecordingRouter()
    uow.messages_w.fail = True

    with pytest.raises(StorageError):
        await conversation_service.send_message(
            7, 3, ParticipantRole.STUDENT, "hello", uow, router,
        )

    assert router.dispatched == []
    assert uow._committed is False
