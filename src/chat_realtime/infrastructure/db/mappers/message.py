from __future__ import annotations

from typing import Any

from chat_realtime.domain.entities.message import Message, Reaction
from chat_realtime.domain.value_objects.enums import MessageStatus
from chat_realtime.infrastructure.db.models.message import MessageModel


def reactions_to_json(reactions: tuple[Reaction, ...]) -> list[dict[str, Any]]:
    return [
        {"emoji": r.emoji, "user_id": r.user_id, "user_name": r.user_name}
        for r in reactions
    ]


def reactions_from_json(raw: list[dict[str, Any]] | None) -> tuple[Reaction, ...]:
    return tuple(
        Reaction(emoji=r["emoji"], user_id=r["user_id"], user_name=r.get("user_name"))
        for r in raw or []
    )


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        conversation_id=model.conversation_id,
        sender_id=model.sender_id,
        content=model.content,
        status=MessageStatus(model.status),
        read_by=tuple(model.read_by or ()),
        created_at=model.created_at,
        updated_at=model.updated_at,
        file_url=model.file_url,
        file_type=model.file_type,
        file_name=model.file_name,
        reactions=reactions_from_json(model.reactions),
        reply_to=model.reply_to,
        reply_snippet=model.reply_snippet,
        reply_sender_name=model.reply_sender_name,
        is_encrypted=model.is_encrypted,
        is_edited=model.is_edited,
        deleted_at=model.deleted_at,
    )


def entity_to_model(entity: Message) -> MessageModel:
    return MessageModel(
        id=entity.id,
        conversation_id=entity.conversation_id,
        sender_id=entity.sender_id,
        content=entity.content,
        status=entity.status.value,
        read_by=list(entity.read_by),
        reactions=reactions_to_json(entity.reactions),
        file_url=entity.file_url,
        file_type=entity.file_type,
        file_name=entity.file_name,
        reply_to=entity.reply_to,
        reply_snippet=entity.reply_snippet,
        reply_sender_name=entity.reply_sender_name,
        is_encrypted=entity.is_encrypted,
        is_edited=entity.is_edited,
        deleted_at=entity.deleted_at,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )
