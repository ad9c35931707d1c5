from __future__ import annotations

import uuid

import pytest

from chat_realtime.application.exceptions import NotFoundError, ValidationError
from chat_realtime.domain.entities.message import Reaction, toggle_reaction
from chat_realtime.services import reaction_service
from tests.conftest import ALICE, BOB, make_conversation, make_message


def test_toggle_adds_reaction():
    result = toggle_reaction((), user_id=BOB, user_name="Bob", emoji="👍")

    assert result == (Reaction(emoji="👍", user_id=BOB, user_name="Bob"),)


def test_toggle_same_emoji_removes():
    existing = (Reaction(emoji="👍", user_id=BOB, user_name="Bob"),)

    assert toggle_reaction(existing, user_id=BOB, user_name="Bob", emoji="👍") == ()


def test_toggle_other_emoji_replaces_in_place():
    existing = (
        Reaction(emoji="🎉", user_id=ALICE, user_name="Alice"),
        Reaction(emoji="👍", user_id=BOB, user_name="Bob"),
        Reaction(emoji="😀", user_id="u-dave", user_name="Dave"),
    )

    result = toggle_reaction(existing, user_id=BOB, user_name="Bob", emoji="❤️")

    assert [r.emoji for r in result] == ["🎉", "❤️", "😀"]
    assert result[1].user_id == BOB


@pytest.mark.asyncio
async def test_react_broadcasts_to_conversation_room(uow, emitter):
    conv = uow.add_conversation(make_conversation())
    msg = uow.add_message(make_message(conversation_id=conv.id))

    updated = await reaction_service.react(msg.id, BOB, "👍", uow, emitter)

    assert updated.reactions == (Reaction(emoji="👍", user_id=BOB, user_name="Bob"),)
    assert uow.messages._store[msg.id].reactions == updated.reactions
    events = emitter.named("messageUpdated")
    assert events[0].room == str(conv.id)
    assert events[0].data["reactions"] == [{"emoji": "👍", "user": BOB, "userName": "Bob"}]
    assert events[0].data["sender"]["id"] == ALICE


@pytest.mark.asyncio
async def test_react_twice_with_same_emoji_clears(uow, emitter):
    msg = uow.add_message(make_message())

    await reaction_service.react(msg.id, BOB, "👍", uow, emitter)
    await reaction_service.react(msg.id, BOB, "👍", uow, emitter)

    assert uow.messages._store[msg.id].reactions == ()
    assert emitter.named("messageUpdated")[-1].data["reactions"] == []


@pytest.mark.asyncio
async def test_react_with_another_emoji_keeps_single_entry(uow, emitter):
    msg = uow.add_message(make_message())

    await reaction_service.react(msg.id, BOB, "👍", uow, emitter)
    await reaction_service.react(msg.id, BOB, "❤️", uow, emitter)

    reactions = uow.messages._store[msg.id].reactions
    assert [(r.user_id, r.emoji) for r in reactions] == [(BOB, "❤️")]


@pytest.mark.asyncio
async def test_react_unknown_reactor_rejected(uow, emitter):
    msg = uow.add_message(make_message())

    with pytest.raises(ValidationError):
        await reaction_service.react(msg.id, "u-ghost", "👍", uow, emitter)

    assert emitter.sent == []


@pytest.mark.asyncio
async def test_react_missing_emoji_rejected(uow, emitter):
    msg = uow.add_message(make_message())

    with pytest.raises(ValidationError):
        await reaction_service.react(msg.id, BOB, None, uow, emitter)


@pytest.mark.asyncio
async def test_react_missing_message(uow, emitter):
    with pytest.raises(NotFoundError):
        await reaction_service.react(uuid.uuid4(), BOB, "👍", uow, emitter)
