from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from chat_realtime.domain.value_objects.enums import MessageStatus

DELETED_PLACEHOLDER = "This message was deleted"


@dataclass(frozen=True, slots=True)
class Reaction:
    emoji: str
    user_id: str
    user_name: str | None = None


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    conversation_id: UUID
    sender_id: str
    content: str | None
    status: MessageStatus
    read_by: tuple[str, ...]
    created_at: datetime
    updated_at: datetime
    file_url: str | None = None
    file_type: str | None = None
    file_name: str | None = None
    reactions: tuple[Reaction, ...] = field(default_factory=tuple)
    reply_to: UUID | None = None
    reply_snippet: str | None = None
    reply_sender_name: str | None = None
    is_encrypted: bool = False
    is_edited: bool = False
    deleted_at: datetime | None = None


def toggle_reaction(
    reactions: tuple[Reaction, ...],
    *,
    user_id: str,
    user_name: str | None,
    emoji: str,
) -> tuple[Reaction, ...]:
    """Apply one user's reaction to a reaction list.

    No entry for the user appends one, the same emoji again removes it and a
    different emoji replaces it in place. A user never ends up with more than
    one entry.
    """
    for index, existing in enumerate(reactions):
        if existing.user_id != user_id:
            continue
        if existing.emoji == emoji:
            return reactions[:index] + reactions[index + 1:]
        replaced = Reaction(emoji=emoji, user_id=user_id, user_name=existing.user_name or user_name)
        return reactions[:index] + (replaced,) + reactions[index + 1:]
    return reactions + (Reaction(emoji=emoji, user_id=user_id, user_name=user_name),)
