"""Payloads pushed to Socket.IO clients (camelCase on the wire)."""
from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from chat_realtime.domain.entities.account import AccountProfile
from chat_realtime.domain.entities.conversation import Conversation
from chat_realtime.domain.entities.message import Message


class OutboundModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def payload(self, *, exclude_none: bool = False) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)


class ProfileView(OutboundModel):
    id: str
    full_name: str | None = None
    email: str | None = None
    profile_picture_url: str | None = None

    @classmethod
    def build(cls, subject_id: str, profile: AccountProfile | None) -> ProfileView:
        if profile is None:
            return cls(id=subject_id)
        return cls(
            id=profile.id,
            full_name=profile.full_name,
            email=profile.email,
            profile_picture_url=profile.profile_picture_url,
        )


class ReactionView(OutboundModel):
    emoji: str
    user: str
    user_name: str | None = None


class MessageView(OutboundModel):
    id: UUID
    conversation_id: UUID
    sender: ProfileView
    content: str | None
    file_url: str | None
    file_type: str | None
    file_name: str | None
    status: str
    read_by: list[str]
    reactions: list[ReactionView]
    reply_to: UUID | None
    reply_snippet: str | None
    reply_sender_name: str | None
    is_encrypted: bool
    is_edited: bool
    deleted_at: datetime | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def build(cls, message: Message, sender: AccountProfile | None) -> MessageView:
        return cls(
            id=message.id,
            conversation_id=message.conversation_id,
            sender=ProfileView.build(message.sender_id, sender),
            content=message.content,
            file_url=message.file_url,
            file_type=message.file_type,
            file_name=message.file_name,
            status=str(message.status),
            read_by=list(message.read_by),
            reactions=[
                ReactionView(emoji=r.emoji, user=r.user_id, user_name=r.user_name)
                for r in message.reactions
            ],
            reply_to=message.reply_to,
            reply_snippet=message.reply_snippet,
            reply_sender_name=message.reply_sender_name,
            is_encrypted=message.is_encrypted,
            is_edited=message.is_edited,
            deleted_at=message.deleted_at,
            created_at=message.created_at,
            updated_at=message.updated_at,
        )


class ConversationView(OutboundModel):
    id: UUID
    participants: list[ProfileView]
    is_group_chat: bool
    group_name: str | None
    last_message: MessageView | None
    updated_at: datetime

    @classmethod
    def build(
        cls,
        conversation: Conversation,
        profiles: Mapping[str, AccountProfile],
        last_message: MessageView | None,
    ) -> ConversationView:
        return cls(
            id=conversation.id,
            participants=[
                ProfileView.build(pid, profiles.get(pid)) for pid in conversation.participant_ids
            ],
            is_group_chat=conversation.is_group_chat,
            group_name=conversation.group_name,
            last_message=last_message,
            updated_at=conversation.updated_at,
        )


class MessageDeliveredEvent(OutboundModel):
    message_id: UUID
    conversation_id: UUID


class MessagesReadEvent(OutboundModel):
    conversation_id: UUID


class UserTypingEvent(OutboundModel):
    conversation_id: UUID
    user_id: str | None
    user_name: str | None
    is_typing: bool


class GroupKeyEvent(OutboundModel):
    conversation_id: UUID
    sender_id: str
    encrypted_key: Any


class MessageErrorEvent(OutboundModel):
    message: str
    details: str | None = None
