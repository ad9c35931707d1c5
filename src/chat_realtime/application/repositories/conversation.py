from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from chat_realtime.domain.entities.conversation import Conversation


class ConversationReader(Protocol):
    async def get_by_id(self, conversation_id: UUID) -> Conversation | None: ...


class ConversationWriter(Protocol):
    async def set_last_message(
        self, conversation_id: UUID, message_id: UUID, ts: datetime
    ) -> None:
        """Point the conversation at its newest message and bump updated_at."""
        ...
