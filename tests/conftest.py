"""Shared test fixtures."""
from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, Iterable
from uuid import UUID

import pytest

from chat_realtime.domain.entities.account import AccountProfile
from chat_realtime.domain.entities.conversation import Conversation
from chat_realtime.domain.entities.message import Message, Reaction
from chat_realtime.domain.value_objects.enums import MessageStatus, ParticipantKind
from chat_realtime.infrastructure.realtime.registry import ConnectionRegistry

ALICE = "u-alice"
BOB = "u-bob"
CAROL = "u-carol"


def make_conversation(
    *,
    participants: tuple[str, ...] = (ALICE, BOB),
    is_group_chat: bool = False,
    conversation_id: UUID | None = None,
) -> Conversation:
    now = datetime.now(timezone.utc)
    return Conversation(
        id=conversation_id or uuid.uuid4(),
        participant_ids=participants,
        is_group_chat=is_group_chat,
        group_name="Team" if is_group_chat else None,
        last_message_id=None,
        created_at=now,
        updated_at=now,
    )


def make_message(
    *,
    conversation_id: UUID | None = None,
    sender_id: str = ALICE,
    content: str | None = "hello",
    status: MessageStatus = MessageStatus.SENT,
    reactions: tuple[Reaction, ...] = (),
) -> Message:
    now = datetime.now(timezone.utc)
    return Message(
        id=uuid.uuid4(),
        conversation_id=conversation_id or uuid.uuid4(),
        sender_id=sender_id,
        content=content,
        status=status,
        read_by=(sender_id,),
        created_at=now,
        updated_at=now,
        reactions=reactions,
    )


def make_profile(user_id: str, name: str | None = None) -> AccountProfile:
    return AccountProfile(
        id=user_id,
        full_name=name or user_id.removeprefix("u-").title(),
        email=f"{user_id}@example.com",
        profile_picture_url=None,
    )


@dataclass
class FakeConversationReader:
    _store: dict[UUID, Conversation] = field(default_factory=dict)

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        return self._store.get(conversation_id)


@dataclass
class FakeConversationWriter:
    _reader: FakeConversationReader

    async def set_last_message(self, conversation_id: UUID, message_id: UUID, ts: datetime) -> None:
        conv = self._reader._store.get(conversation_id)
        if conv is not None:
            self._reader._store[conversation_id] = replace(
                conv, last_message_id=message_id, updated_at=ts,
            )


@dataclass
class FakeMessageReader:
    _store: dict[UUID, Message] = field(default_factory=dict)

    async def get_by_id(self, message_id: UUID) -> Message | None:
        return self._store.get(message_id)

    def in_conversation(self, conversation_id: UUID) -> list[Message]:
        return [m for m in self._store.values() if m.conversation_id == conversation_id]


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader

    async def create(self, message: Message) -> Message:
        self._reader._store[message.id] = message
        return message

    async def mark_delivered(self, message_id: UUID) -> bool:
        msg = self._reader._store[message_id]
        if msg.status != MessageStatus.SENT:
            return False
        self._reader._store[message_id] = replace(msg, status=MessageStatus.DELIVERED)
        return True

    async def mark_conversation_read(self, conversation_id: UUID, reader_id: str) -> int:
        changed = 0
        for msg in self._reader.in_conversation(conversation_id):
            if msg.sender_id == reader_id or msg.status == MessageStatus.READ:
                continue
            read_by = msg.read_by if reader_id in msg.read_by else msg.read_by + (reader_id,)
            self._reader._store[msg.id] = replace(msg, status=MessageStatus.READ, read_by=read_by)
            changed += 1
        return changed

    async def save_reactions(self, message_id: UUID, reactions: tuple[Reaction, ...], ts: datetime) -> None:
        msg = self._reader._store[message_id]
        self._reader._store[message_id] = replace(msg, reactions=reactions, updated_at=ts)

    async def edit_content(self, message_id: UUID, content: str, ts: datetime) -> None:
        msg = self._reader._store[message_id]
        self._reader._store[message_id] = replace(msg, content=content, is_edited=True, updated_at=ts)

    async def soft_delete(self, message_id: UUID, placeholder: str, ts: datetime) -> None:
        msg = self._reader._store[message_id]
        self._reader._store[message_id] = replace(
            msg,
            content=placeholder,
            file_url=None,
            file_type=None,
            file_name=None,
            deleted_at=ts,
            updated_at=ts,
        )


@dataclass
class FakeAccountReader:
    _users: dict[str, AccountProfile] = field(default_factory=dict)

    async def get_user(self, user_id: str) -> AccountProfile | None:
        return self._users.get(user_id)

    async def get_users(self, user_ids: Iterable[str]) -> dict[str, AccountProfile]:
        return {uid: self._users[uid] for uid in user_ids if uid in self._users}


@dataclass
class FakeAccountWriter:
    _last_seen: dict[tuple[ParticipantKind, str], datetime] = field(default_factory=dict)
    fail: bool = False

    async def touch_last_seen(self, kind: ParticipantKind, subject_id: str, ts: datetime) -> None:
        if self.fail:
            raise RuntimeError("database unavailable")
        self._last_seen[(kind, subject_id)] = ts


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    conversations: FakeConversationReader = field(default_factory=FakeConversationReader)
    conversations_w: FakeConversationWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    accounts: FakeAccountReader = field(default_factory=FakeAccountReader)
    accounts_w: FakeAccountWriter = field(default_factory=FakeAccountWriter)
    commits: int = 0

    def __post_init__(self) -> None:
        if self.conversations_w is None:
            self.conversations_w = FakeConversationWriter(self.conversations)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    def add_conversation(self, conversation: Conversation) -> Conversation:
        self.conversations._store[conversation.id] = conversation
        return conversation

    def add_message(self, message: Message) -> Message:
        self.messages._store[message.id] = message
        return message

    def add_user(self, profile: AccountProfile) -> AccountProfile:
        self.accounts._users[profile.id] = profile
        return profile

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        pass


def uow_factory_for(uow: FakeUoW) -> Callable[[], Any]:
    @asynccontextmanager
    async def factory() -> AsyncIterator[FakeUoW]:
        yield uow

    return factory


@dataclass(frozen=True)
class Emitted:
    event: str
    data: Any
    to: str | None = None
    room: str | None = None
    skip_sid: str | None = None


@dataclass
class FakeEmitter:
    """Records what the services push instead of sending it."""
    sent: list[Emitted] = field(default_factory=list)

    async def to_room(self, room: str, event: str, data: Any, *, skip_sid: str | None = None) -> None:
        self.sent.append(Emitted(event=event, data=data, room=room, skip_sid=skip_sid))

    async def to_channel(self, sid: str, event: str, data: Any) -> None:
        self.sent.append(Emitted(event=event, data=data, to=sid))

    async def to_all(self, event: str, data: Any) -> None:
        self.sent.append(Emitted(event=event, data=data))

    def named(self, event: str) -> list[Emitted]:
        return [e for e in self.sent if e.event == event]


@dataclass
class FakeSocketServer:
    """Stands in for socketio.AsyncServer: handlers, sessions, rooms and emits."""
    handlers: dict[str, Callable[..., Any]] = field(default_factory=dict)
    sessions: dict[str, dict[str, Any]] = field(default_factory=dict)
    rooms: dict[str, set[str]] = field(default_factory=dict)
    sent: list[Emitted] = field(default_factory=list)

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self.handlers[event] = handler

    async def emit(
        self,
        event: str,
        data: Any = None,
        to: str | None = None,
        room: str | None = None,
        skip_sid: str | None = None,
    ) -> None:
        self.sent.append(Emitted(event=event, data=data, to=to, room=room, skip_sid=skip_sid))

    async def save_session(self, sid: str, session: dict[str, Any]) -> None:
        self.sessions[sid] = session

    async def get_session(self, sid: str) -> dict[str, Any]:
        return self.sessions.get(sid, {})

    async def enter_room(self, sid: str, room: str) -> None:
        self.rooms.setdefault(room, set()).add(sid)

    async def leave_room(self, sid: str, room: str) -> None:
        self.rooms.get(room, set()).discard(sid)

    def named(self, event: str) -> list[Emitted]:
        return [e for e in self.sent if e.event == event]


def environ_for(query: str) -> dict[str, Any]:
    return {"asgi.scope": {"type": "websocket", "query_string": query.encode()}}


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture
def emitter() -> FakeEmitter:
    return FakeEmitter()


@pytest.fixture
def uow() -> FakeUoW:
    uow = FakeUoW()
    for user_id in (ALICE, BOB, CAROL):
        uow.add_user(make_profile(user_id))
    return uow
