from __future__ import annotations

import logging
import uuid

from chat_realtime.application.dto.outbound import MessagesReadEvent
from chat_realtime.application.ports.realtime import RealtimeEmitter
from chat_realtime.application.uow import UnitOfWork
from chat_realtime.domain.value_objects.participant_key import ParticipantKey
from chat_realtime.infrastructure.realtime.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


async def mark_read(
    conversation_id: uuid.UUID,
    reader_id: str,
    uow: UnitOfWork,
    registry: ConnectionRegistry,
    emitter: RealtimeEmitter,
) -> int:
    """Mark everything the reader has not sent as read and tell the other side.

    One bulk update, safe to repeat. Returns the number of messages changed.
    """
    conversation = await uow.conversations.get_by_id(conversation_id)
    if conversation is None:
        logger.info("mark_read: conversation %s not found", conversation_id)
        return 0

    changed = await uow.messages_w.mark_conversation_read(conversation_id, reader_id)
    await uow.commit()
    logger.info(
        "User %s marked messages as read in %s (updated=%d)",
        reader_id, conversation_id, changed,
    )
    if not changed:
        return 0

    payload = MessagesReadEvent(conversation_id=conversation_id).payload()
    for other_id in conversation.others(reader_id):
        sid = registry.lookup(ParticipantKey.user(other_id))
        if sid is not None:
            await emitter.to_channel(sid, "messagesRead", payload)
    return changed
