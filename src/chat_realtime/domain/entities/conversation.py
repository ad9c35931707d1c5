from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Conversation:
    id: UUID
    participant_ids: tuple[str, ...]
    is_group_chat: bool
    group_name: str | None
    last_message_id: UUID | None
    created_at: datetime
    updated_at: datetime

    @property
    def is_direct(self) -> bool:
        return not self.is_group_chat and len(self.participant_ids) == 2

    def others(self, subject_id: str) -> list[str]:
        """Participants other than ``subject_id``."""
        return [p for p in self.participant_ids if p != subject_id]
