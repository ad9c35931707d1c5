from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID


@dataclass(frozen=True, slots=True)
class SendMessageDTO:
    conversation_id: UUID | None
    sender_id: str | None
    content: str | None = None
    file_url: str | None = None
    file_type: str | None = None
    file_name: str | None = None
    is_encrypted: bool = False
    reply_to: UUID | None = None
    reply_snippet: str | None = None
    reply_sender_name: str | None = None

    @property
    def has_body(self) -> bool:
        return bool(self.content) or bool(self.file_url)


@dataclass(frozen=True, slots=True)
class TypingDTO:
    conversation_id: UUID
    user_id: str | None
    user_name: str | None


@dataclass(frozen=True, slots=True)
class GroupKeyDTO:
    conversation_id: UUID | None
    sender_id: str | None
    recipient_id: str | None
    encrypted_key: Any

    @property
    def is_complete(self) -> bool:
        return bool(
            self.conversation_id and self.sender_id and self.recipient_id and self.encrypted_key
        )
