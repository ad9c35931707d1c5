"""Client → server Socket.IO payloads."""
from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from chat_realtime.application.dto.message import GroupKeyDTO, SendMessageDTO, TypingDTO


class InboundModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ConversationRef(InboundModel):
    conversation_id: UUID

    @classmethod
    def parse(cls, data: Any) -> ConversationRef:
        # joinConversation / leaveConversation may send the bare id.
        if isinstance(data, (str, UUID)):
            data = {"conversationId": data}
        return cls.model_validate(data)


class SendMessageIn(InboundModel):
    conversation_id: UUID | None = None
    sender_id: str | None = None
    content: str | None = None
    file_url: str | None = None
    file_type: str | None = None
    file_name: str | None = None
    is_encrypted: bool = False
    reply_to: UUID | None = None
    reply_snippet: str | None = None
    reply_sender_name: str | None = None

    def to_dto(self) -> SendMessageDTO:
        return SendMessageDTO(
            conversation_id=self.conversation_id,
            sender_id=self.sender_id,
            content=self.content,
            file_url=self.file_url,
            file_type=self.file_type,
            file_name=self.file_name,
            is_encrypted=self.is_encrypted,
            reply_to=self.reply_to,
            reply_snippet=self.reply_snippet,
            reply_sender_name=self.reply_sender_name,
        )


class ReactIn(InboundModel):
    conversation_id: UUID | None = None
    message_id: UUID | None = None
    emoji: str | None = None


class TypingIn(InboundModel):
    conversation_id: UUID
    user_id: str | None = None
    user_name: str | None = None

    def to_dto(self) -> TypingDTO:
        return TypingDTO(
            conversation_id=self.conversation_id,
            user_id=self.user_id,
            user_name=self.user_name,
        )


class ShareGroupKeyIn(InboundModel):
    conversation_id: UUID | None = None
    sender_id: str | None = None
    recipient_id: str | None = None
    encrypted_key: Any = None

    def to_dto(self) -> GroupKeyDTO:
        return GroupKeyDTO(
            conversation_id=self.conversation_id,
            sender_id=self.sender_id,
            recipient_id=self.recipient_id,
            encrypted_key=self.encrypted_key,
        )


class EditMessageIn(InboundModel):
    message_id: UUID
    content: str | None = None


class DeleteMessageIn(InboundModel):
    message_id: UUID
