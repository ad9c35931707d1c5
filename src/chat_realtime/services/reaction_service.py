from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone

from chat_realtime.application.dto.outbound import MessageView
from chat_realtime.application.exceptions import NotFoundError, ValidationError
from chat_realtime.application.ports.realtime import RealtimeEmitter, conversation_room
from chat_realtime.application.uow import UnitOfWork
from chat_realtime.domain.entities.message import Message, toggle_reaction


async def react(
    message_id: uuid.UUID | None,
    reactor_id: str | None,
    emoji: str | None,
    uow: UnitOfWork,
    emitter: RealtimeEmitter,
) -> Message:
    """Toggle the reactor's emoji on a message and rebroadcast the message.

    The whole reaction list is written back; concurrent reactions on the
    same message resolve last-write-wins.
    """
    reactor = await uow.accounts.get_user(reactor_id) if reactor_id else None
    if reactor is None or not message_id or not emoji:
        raise ValidationError("Missing data for reaction.")

    msg = await uow.messages.get_by_id(message_id)
    if msg is None:
        raise NotFoundError("Message not found.")

    reactions = toggle_reaction(
        msg.reactions,
        user_id=reactor.id,
        user_name=reactor.full_name,
        emoji=emoji,
    )
    now = datetime.now(timezone.utc)
    await uow.messages_w.save_reactions(msg.id, reactions, now)
    await uow.commit()
    msg = replace(msg, reactions=reactions, updated_at=now)

    sender = reactor if reactor.id == msg.sender_id else await uow.accounts.get_user(msg.sender_id)
    await emitter.to_room(
        conversation_room(msg.conversation_id),
        "messageUpdated",
        MessageView.build(msg, sender).payload(),
    )
    return msg
