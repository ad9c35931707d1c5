"""Typing indicators and end-to-end key relay. Nothing here is persisted."""
from __future__ import annotations

import logging

from chat_realtime.application.dto.message import GroupKeyDTO, TypingDTO
from chat_realtime.application.dto.outbound import GroupKeyEvent, UserTypingEvent
from chat_realtime.application.ports.realtime import RealtimeEmitter, conversation_room
from chat_realtime.domain.value_objects.participant_key import ParticipantKey
from chat_realtime.infrastructure.realtime.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


async def set_typing(
    sid: str,
    cmd: TypingDTO,
    is_typing: bool,
    emitter: RealtimeEmitter,
) -> None:
    """Relay a typing state to the rest of the room, never back to ``sid``."""
    event = UserTypingEvent(
        conversation_id=cmd.conversation_id,
        user_id=cmd.user_id,
        user_name=cmd.user_name,
        is_typing=is_typing,
    )
    await emitter.to_room(
        conversation_room(cmd.conversation_id),
        "userTyping",
        event.payload(),
        skip_sid=sid,
    )


async def share_group_key(
    cmd: GroupKeyDTO,
    registry: ConnectionRegistry,
    emitter: RealtimeEmitter,
) -> bool:
    """Push an encrypted group key to its recipient only.

    Offline recipients are not queued for; the sender retries once presence
    shows them online. Returns True when the key was relayed.
    """
    if not cmd.is_complete:
        logger.error("Invalid data for shareGroupKey event")
        return False

    recipient_sid = registry.lookup(ParticipantKey.user(cmd.recipient_id))  # type: ignore[arg-type]
    if recipient_sid is None:
        logger.info("Recipient %s is offline, group key not shared", cmd.recipient_id)
        return False

    event = GroupKeyEvent(
        conversation_id=cmd.conversation_id,  # type: ignore[arg-type]
        sender_id=cmd.sender_id,  # type: ignore[arg-type]
        encrypted_key=cmd.encrypted_key,
    )
    await emitter.to_channel(recipient_sid, "receiveGroupKey", event.payload())
    logger.info("Relayed group key from %s to %s", cmd.sender_id, cmd.recipient_id)
    return True
