from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from chat_realtime.application.dto.message import SendMessageDTO
from chat_realtime.application.dto.outbound import (
    ConversationView,
    MessageDeliveredEvent,
    MessageView,
)
from chat_realtime.application.exceptions import ForbiddenError, NotFoundError, ValidationError
from chat_realtime.application.ports.realtime import RealtimeEmitter, conversation_room
from chat_realtime.application.uow import UnitOfWork
from chat_realtime.domain.entities.conversation import Conversation
from chat_realtime.domain.entities.message import DELETED_PLACEHOLDER, Message
from chat_realtime.domain.value_objects.enums import MessageStatus
from chat_realtime.domain.value_objects.participant_key import ParticipantKey
from chat_realtime.infrastructure.realtime.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


async def send_message(
    cmd: SendMessageDTO,
    uow: UnitOfWork,
    registry: ConnectionRegistry,
    emitter: RealtimeEmitter,
    *,
    push_conversation_updates: bool = True,
) -> Message:
    """Persist a chat message and fan it out.

    The message insert and the conversation's last-message update commit
    together, so a missing conversation leaves nothing behind.
    """
    if not cmd.conversation_id or not cmd.sender_id or not cmd.has_body:
        raise ValidationError("Missing data for sending message.")

    conversation = await uow.conversations.get_by_id(cmd.conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found.")

    now = datetime.now(timezone.utc)
    msg = await uow.messages_w.create(
        Message(
            id=uuid.uuid4(),
            conversation_id=conversation.id,
            sender_id=cmd.sender_id,
            content=cmd.content,
            status=MessageStatus.SENT,
            read_by=(cmd.sender_id,),
            created_at=now,
            updated_at=now,
            file_url=cmd.file_url,
            file_type=cmd.file_type,
            file_name=cmd.file_name,
            reply_to=cmd.reply_to,
            reply_snippet=cmd.reply_snippet,
            reply_sender_name=cmd.reply_sender_name,
            is_encrypted=cmd.is_encrypted,
        )
    )
    await uow.conversations_w.set_last_message(conversation.id, msg.id, now)
    await uow.commit()
    conversation = replace(conversation, last_message_id=msg.id, updated_at=now)

    sender = await uow.accounts.get_user(msg.sender_id)
    view = MessageView.build(msg, sender)
    await emitter.to_room(conversation_room(conversation.id), "receiveMessage", view.payload())

    if conversation.is_direct:
        msg = await _mark_delivered_if_reachable(msg, conversation, uow, registry, emitter)

    if push_conversation_updates:
        await _push_conversation_update(conversation, MessageView.build(msg, sender), uow, registry, emitter)

    logger.info("Message %s saved and emitted in conversation %s", msg.id, conversation.id)
    return msg


async def _mark_delivered_if_reachable(
    msg: Message,
    conversation: Conversation,
    uow: UnitOfWork,
    registry: ConnectionRegistry,
    emitter: RealtimeEmitter,
) -> Message:
    recipients = conversation.others(msg.sender_id)
    if not recipients or registry.lookup(ParticipantKey.user(recipients[0])) is None:
        return msg

    if await uow.messages_w.mark_delivered(msg.id):
        await uow.commit()
        msg = replace(msg, status=MessageStatus.DELIVERED)

    sender_sid = registry.lookup(ParticipantKey.user(msg.sender_id))
    if sender_sid is not None:
        event = MessageDeliveredEvent(message_id=msg.id, conversation_id=msg.conversation_id)
        await emitter.to_channel(sender_sid, "messageDelivered", event.payload())
    return msg


async def _push_conversation_update(
    conversation: Conversation,
    last_message: MessageView,
    uow: UnitOfWork,
    registry: ConnectionRegistry,
    emitter: RealtimeEmitter,
) -> None:
    """Direct push to each registered participant, joined to the room or not."""
    targets = [
        sid
        for sid in (registry.lookup(ParticipantKey.user(pid)) for pid in conversation.participant_ids)
        if sid is not None
    ]
    if not targets:
        return

    profiles = await uow.accounts.get_users(conversation.participant_ids)
    payload = ConversationView.build(conversation, profiles, last_message).payload()
    for sid in targets:
        await emitter.to_channel(sid, "conversationUpdated", payload)


async def edit_message(
    message_id: uuid.UUID,
    editor_id: str,
    content: str,
    uow: UnitOfWork,
    emitter: RealtimeEmitter,
) -> Message:
    if not content:
        raise ValidationError("Missing data for editing message.")
    msg = await _load_own_message(message_id, editor_id, uow, action="edit")

    now = datetime.now(timezone.utc)
    await uow.messages_w.edit_content(msg.id, content, now)
    await uow.commit()
    msg = replace(msg, content=content, is_edited=True, updated_at=now)

    await _broadcast_updated(msg, uow, emitter)
    return msg


async def delete_message(
    message_id: uuid.UUID,
    editor_id: str,
    uow: UnitOfWork,
    emitter: RealtimeEmitter,
) -> Message:
    """Soft delete: content replaced by a placeholder, attachment dropped."""
    msg = await _load_own_message(message_id, editor_id, uow, action="delete")

    now = datetime.now(timezone.utc)
    await uow.messages_w.soft_delete(msg.id, DELETED_PLACEHOLDER, now)
    await uow.commit()
    msg = replace(
        msg,
        content=DELETED_PLACEHOLDER,
        file_url=None,
        file_type=None,
        file_name=None,
        deleted_at=now,
        updated_at=now,
    )

    await _broadcast_updated(msg, uow, emitter)
    return msg


async def _load_own_message(
    message_id: uuid.UUID, editor_id: str, uow: UnitOfWork, *, action: str
) -> Message:
    msg = await uow.messages.get_by_id(message_id)
    if msg is None:
        raise NotFoundError("Message not found.")
    if msg.sender_id != editor_id:
        raise ForbiddenError(f"You are not authorized to {action} this message.")
    return msg


async def _broadcast_updated(msg: Message, uow: UnitOfWork, emitter: RealtimeEmitter) -> None:
    sender = await uow.accounts.get_user(msg.sender_id)
    await emitter.to_room(
        conversation_room(msg.conversation_id),
        "messageUpdated",
        MessageView.build(msg, sender).payload(),
    )
