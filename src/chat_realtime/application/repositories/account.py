from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from chat_realtime.domain.entities.account import AccountProfile
from chat_realtime.domain.value_objects.enums import ParticipantKind


class AccountReader(Protocol):
    async def get_user(self, user_id: str) -> AccountProfile | None: ...

    async def get_users(self, user_ids: Iterable[str]) -> dict[str, AccountProfile]: ...


class AccountWriter(Protocol):
    async def touch_last_seen(
        self, kind: ParticipantKind, subject_id: str, ts: datetime
    ) -> None:
        """Record last-seen on the users or admins table depending on ``kind``."""
        ...
