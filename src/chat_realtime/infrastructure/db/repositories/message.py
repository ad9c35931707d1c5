from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import case, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from chat_realtime.domain.entities.message import Message, Reaction
from chat_realtime.domain.value_objects.enums import MessageStatus
from chat_realtime.infrastructure.db.mappers import message as mapper
from chat_realtime.infrastructure.db.models.message import MessageModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, message_id: UUID) -> Message | None:
        result = await self._session.get(MessageModel, message_id)
        return mapper.model_to_entity(result) if result else None


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, message: Message) -> Message:
        model = mapper.entity_to_model(message)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def mark_delivered(self, message_id: UUID) -> bool:
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.id == message_id,
                MessageModel.status == MessageStatus.SENT.value,
            )
            .values(status=MessageStatus.DELIVERED.value)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def mark_conversation_read(self, conversation_id: UUID, reader_id: str) -> int:
        # read_by is a set: append the reader only when absent.
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.conversation_id == conversation_id,
                MessageModel.sender_id != reader_id,
                MessageModel.status != MessageStatus.READ.value,
            )
            .values(
                status=MessageStatus.READ.value,
                read_by=case(
                    (MessageModel.read_by.contains([reader_id]), MessageModel.read_by),
                    else_=func.array_append(MessageModel.read_by, reader_id),
                ),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def save_reactions(
        self,
        message_id: UUID,
        reactions: tuple[Reaction, ...],
        ts: datetime,
    ) -> None:
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id)
            .values(reactions=mapper.reactions_to_json(reactions), updated_at=ts)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def edit_content(self, message_id: UUID, content: str, ts: datetime) -> None:
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id)
            .values(content=content, is_edited=True, updated_at=ts)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def soft_delete(self, message_id: UUID, placeholder: str, ts: datetime) -> None:
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id)
            .values(
                content=placeholder,
                file_url=None,
                file_type=None,
                file_name=None,
                deleted_at=ts,
                updated_at=ts,
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
