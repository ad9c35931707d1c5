from __future__ import annotations

import pytest

from chat_realtime.domain.value_objects.enums import ParticipantKind
from chat_realtime.domain.value_objects.participant_key import ParticipantKey
from chat_realtime.services import presence_service
from tests.conftest import FakeUoW


@pytest.mark.asyncio
async def test_connect_registers_and_broadcasts(registry, emitter):
    await presence_service.participant_connected("sid-1", ParticipantKey.user("42"), registry, emitter)
    await presence_service.participant_connected("sid-2", ParticipantKey.admin("1"), registry, emitter)

    broadcasts = emitter.named("activeUsers")
    assert len(broadcasts) == 2
    assert broadcasts[0].data == ["42"]
    assert sorted(broadcasts[1].data) == ["42", "admin_1"]
    assert all(b.room is None and b.to is None for b in broadcasts)


@pytest.mark.asyncio
async def test_disconnect_broadcasts_and_records_last_seen(registry, emitter):
    uow = FakeUoW()
    await presence_service.participant_connected("sid-1", ParticipantKey.user("42"), registry, emitter)

    key = await presence_service.participant_disconnected("sid-1", registry, emitter, uow)

    assert key == ParticipantKey.user("42")
    assert emitter.named("activeUsers")[-1].data == []
    assert (ParticipantKind.USER, "42") in uow.accounts_w._last_seen
    assert uow.commits == 1


@pytest.mark.asyncio
async def test_admin_disconnect_updates_admin_last_seen(registry, emitter):
    uow = FakeUoW()
    await presence_service.participant_connected("sid-1", ParticipantKey.admin("1"), registry, emitter)

    await presence_service.participant_disconnected("sid-1", registry, emitter, uow)

    assert list(uow.accounts_w._last_seen) == [(ParticipantKind.ADMIN, "1")]


@pytest.mark.asyncio
async def test_unknown_sid_disconnect_does_nothing(registry, emitter):
    uow = FakeUoW()

    assert await presence_service.participant_disconnected("anon", registry, emitter, uow) is None
    assert emitter.sent == []
    assert uow.accounts_w._last_seen == {}


@pytest.mark.asyncio
async def test_last_seen_failure_is_swallowed(registry, emitter):
    uow = FakeUoW()
    uow.accounts_w.fail = True
    await presence_service.participant_connected("sid-1", ParticipantKey.user("42"), registry, emitter)

    key = await presence_service.participant_disconnected("sid-1", registry, emitter, uow)

    assert key == ParticipantKey.user("42")
    assert registry.lookup(key) is None
    assert emitter.named("activeUsers")[-1].data == []
    assert uow.commits == 0


def test_active_participants_prefixes_admins(registry):
    registry.register(ParticipantKey.user("5"), "a")
    registry.register(ParticipantKey.admin("5"), "b")

    assert presence_service.active_participants(registry) == ["5", "admin_5"]
