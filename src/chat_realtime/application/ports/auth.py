from __future__ import annotations

from typing import Protocol

from chat_realtime.domain.value_objects.participant_key import ParticipantKey


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> ParticipantKey: ...
