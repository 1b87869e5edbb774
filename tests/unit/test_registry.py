from __future__ import annotations

import asyncio

import pytest

from cares_chat.domain.entities.participant import Participant
from cares_chat.domain.value_objects.enums import ParticipantRole
from cares_chat.infrastructure.ws.registry import IdentityRegistry
from tests.conftest import FakeHandle


@pytest.mark.asyncio
async def test_register_then_lookup(student):
    registry = IdentityRegistry()
    handle = FakeHandle()

    previous = await registry.register(student, handle)

    assert previous is None
    assert await registry.lookup(student) is handle


@pytest.mark.asyncio
async def test_reregister_replaces_handle(student):
    registry = IdentityRegistry()
    h1, h2 = FakeHandle(), FakeHandle()

    await registry.register(student, h1)
    previous = await registry.register(student, h2)

    assert previous is h1
    assert await registry.lookup(student) is h2
    assert len(await registry.handles()) == 1


@pytest.mark.asyncio
async def test_unregister_absent_is_noop(student):
    registry = IdentityRegistry()

    assert await registry.unregister(student) is False
    assert await registry.lookup(student) is None


@pytest.mark.asyncio
async def test_unregister_with_stale_handle_keeps_replacement(student):
    registry = IdentityRegistry()
    h1, h2 = FakeHandle(), FakeHandle()
    await registry.register(student, h1)
    await registry.register(student, h2)

    removed = await registry.unregister(student, h1)

    assert removed is False
    assert await registry.lookup(student) is h2


@pytest.mark.asyncio
async def test_same_id_different_roles_are_distinct():
    registry = IdentityRegistry()
    s = Participant(id=5, role=ParticipantRole.STUDENT)
    c = Participant(id=5, role=ParticipantRole.COUNSELOR)
    hs, hc = FakeHandle(), FakeHandle()

    await registry.register(s, hs)
    await registry.register(c, hc)
    await registry.unregister(s)

    assert await registry.lookup(s) is None
    assert await registry.lookup(c) is hc


@pytest.mark.asyncio
async def test_snapshot_splits_by_role(student, counselor):
    registry = IdentityRegistry()
    await registry.register(student, FakeHandle())
    await registry.register(counselor, FakeHandle())

    snapshot = await registry.snapshot()

    assert snapshot.students == frozenset({7})
    assert snapshot.counselors == frozenset({3})
    assert snapshot.to_payload() == {"counselors": [3], "students": [7], "all": [3, 7]}


@pytest.mark.asyncio
async def test_concurrent_registers_keep_every_entry():
    registry = IdentityRegistry()
    participants = [Participant(id=i, role=ParticipantRole.STUDENT) for i in range(1, 51)]
    handles = {p: FakeHandle() for p in participants}

    await asyncio.gather(*(registry.register(p, handles[p]) for p in participants))

    for p in participants:
        assert await registry.lookup(p) is handles[p]
    assert (await registry.snapshot()).students == frozenset(range(1, 51))


@pytest.mark.asyncio
async def test_concurrent_register_and_unregister():
    registry = IdentityRegistry()
    a = Participant(id=1, role=ParticipantRole.STUDENT)
    b = Participant(id=2, role=ParticipantRole.COUNSELOR)
    await registry.register(a, FakeHandle())
    hb = FakeHandle()

    await asyncio.gather(registry.unregister(a), registry.register(b, hb))

    assert await registry.lookup(a) is None
    assert await registry.lookup(b) is hb


@pytest.mark.asyncio
async def test_presence_returns_snapshot_and_matching_handles(student, counselor):
    registry = IdentityRegistry()
    hs, hc = FakeHandle(), FakeHandle()
    await registry.register(student, hs)
    await registry.register(counselor, hc)

    snapshot, handles = await registry.presence()

    assert snapshot.students == frozenset({7})
    assert snapshot.counselors == frozenset({3})
    assert set(map(id, handles)) == {id(hs), id(hc)}


@pytest.mark.asyncio
async def test_presence_is_consistent_under_concurrent_registers():
    registry = IdentityRegistry()
    participants = [Participant(id=i, role=ParticipantRole.COUNSELOR) for i in range(1, 31)]

    async def register(p: Participant) -> None:
        await registry.register(p, FakeHandle())

    async def observe() -> list[tuple[int, int]]:
        seen = []
        for _ in range(30):
            snapshot, handles = await registry.presence()
            seen.append((len(snapshot.counselors), len(handles)))
            await asyncio.sleep(0)
        return seen

    *_, seen = await asyncio.gather(*(register(p) for p in participants), observe())

    assert all(ids == count for ids, count in seen)
