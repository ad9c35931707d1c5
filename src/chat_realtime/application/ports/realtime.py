from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID


def conversation_room(conversation_id: UUID | str) -> str:
    return str(conversation_id)


class RealtimeEmitter(Protocol):
    """Outbound side of the realtime transport."""

    async def to_room(
        self,
        room: str,
        event: str,
        data: Any,
        *,
        skip_sid: str | None = None,
    ) -> None: ...

    async def to_channel(self, sid: str, event: str, data: Any) -> None: ...

    async def to_all(self, event: str, data: Any) -> None: ...
