from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from chat_realtime.domain.entities.message import Message, Reaction


class MessageReader(Protocol):
    async def get_by_id(self, message_id: UUID) -> Message | None: ...


class MessageWriter(Protocol):
    async def create(self, message: Message) -> Message: ...

    async def mark_delivered(self, message_id: UUID) -> bool:
        """Move a message from sent to delivered. Return False if it was past sent."""
        ...

    async def mark_conversation_read(
        self, conversation_id: UUID, reader_id: str
    ) -> int:
        """Bulk-mark messages not sent by the reader as read. Return the number changed."""
        ...

    async def save_reactions(
        self, message_id: UUID, reactions: tuple[Reaction, ...], ts: datetime
    ) -> None: ...

    async def edit_content(self, message_id: UUID, content: str, ts: datetime) -> None: ...

    async def soft_delete(self, message_id: UUID, placeholder: str, ts: datetime) -> None: ...
