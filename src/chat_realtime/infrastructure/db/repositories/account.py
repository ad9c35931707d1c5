from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from chat_realtime.domain.entities.account import AccountProfile
from chat_realtime.domain.value_objects.enums import ParticipantKind
from chat_realtime.infrastructure.db.mappers import account as mapper
from chat_realtime.infrastructure.db.models.account import AdminModel, UserModel


class AccountReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_user(self, user_id: str) -> AccountProfile | None:
        result = await self._session.get(UserModel, user_id)
        return mapper.user_to_entity(result) if result else None

    async def get_users(self, user_ids: Iterable[str]) -> dict[str, AccountProfile]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}
        result = await self._session.execute(select(UserModel).where(UserModel.id.in_(ids)))
        return {m.id: mapper.user_to_entity(m) for m in result.scalars().all()}


class AccountWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def touch_last_seen(
        self,
        kind: ParticipantKind,
        subject_id: str,
        ts: datetime,
    ) -> None:
        model = AdminModel if kind == ParticipantKind.ADMIN else UserModel
        stmt = update(model).where(model.id == subject_id).values(last_seen=ts)
        await self._session.execute(stmt)
