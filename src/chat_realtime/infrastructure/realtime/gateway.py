"""Socket.IO event handlers.

Each inbound event runs in its own short handler. Failures stay inside the
handler that raised them: the originating sid gets a ``messageError`` where
the client expects one, everything else is logged.
"""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import socketio
from pydantic import ValidationError as PayloadError

from chat_realtime.application.dto.outbound import MessageErrorEvent
from chat_realtime.application.exceptions import AppError, ForbiddenError
from chat_realtime.application.ports.auth import TokenVerifier
from chat_realtime.application.ports.realtime import conversation_room
from chat_realtime.application.uow import UoWFactory
from chat_realtime.domain.value_objects.participant_key import ParticipantKey
from chat_realtime.infrastructure.realtime.emitter import SocketIOEmitter
from chat_realtime.infrastructure.realtime.identity import parse_handshake, resolve_identity
from chat_realtime.infrastructure.realtime.protocol import (
    ConversationRef,
    DeleteMessageIn,
    EditMessageIn,
    ReactIn,
    SendMessageIn,
    ShareGroupKeyIn,
    TypingIn,
)
from chat_realtime.infrastructure.realtime.registry import ConnectionRegistry
from chat_realtime.services import (
    message_service,
    presence_service,
    reaction_service,
    read_state_service,
    signaling_service,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SESSION_KEY = "participant"


class ChatGateway:
    def __init__(
        self,
        sio: socketio.AsyncServer,
        registry: ConnectionRegistry,
        uow_factory: UoWFactory,
        *,
        verifier: TokenVerifier | None = None,
        push_conversation_updates: bool = True,
    ) -> None:
        self._sio = sio
        self._registry = registry
        self._uow_factory = uow_factory
        self._verifier = verifier
        self._push_conversation_updates = push_conversation_updates
        self.emitter = SocketIOEmitter(sio)

    def register(self) -> None:
        handlers: dict[str, Callable[..., Awaitable[Any]]] = {
            "connect": self.on_connect,
            "disconnect": self.on_disconnect,
            "joinConversation": self.on_join_conversation,
            "leaveConversation": self.on_leave_conversation,
            "sendMessage": self.on_send_message,
            "markMessagesAsRead": self.on_mark_messages_as_read,
            "reactToMessage": self.on_react_to_message,
            "typing": self.on_typing,
            "stopTyping": self.on_stop_typing,
            "shareGroupKey": self.on_share_group_key,
            "editMessage": self.on_edit_message,
            "deleteMessage": self.on_delete_message,
        }
        for event, handler in handlers.items():
            self._sio.on(event, handler)

    # -- connection lifecycle -------------------------------------------

    async def on_connect(self, sid: str, environ: dict[str, Any], auth: Any | None = None) -> None:
        key = await resolve_identity(parse_handshake(environ, auth), self._verifier)
        await self._sio.save_session(sid, {SESSION_KEY: key})
        if key is None:
            logger.info("Anonymous client %s connected, no participantId provided", sid)
            return
        await presence_service.participant_connected(sid, key, self._registry, self.emitter)

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        logger.debug("Client %s disconnected (%s)", sid, reason)
        async with self._uow_factory() as uow:
            await presence_service.participant_disconnected(sid, self._registry, self.emitter, uow)

    # -- rooms ----------------------------------------------------------

    async def on_join_conversation(self, sid: str, data: Any) -> None:
        ref = self._parse_quietly(sid, "joinConversation", ConversationRef.parse, data)
        if ref is None:
            return
        await self._sio.enter_room(sid, conversation_room(ref.conversation_id))
        logger.debug("%s joined conversation %s", sid, ref.conversation_id)

    async def on_leave_conversation(self, sid: str, data: Any) -> None:
        ref = self._parse_quietly(sid, "leaveConversation", ConversationRef.parse, data)
        if ref is None:
            return
        await self._sio.leave_room(sid, conversation_room(ref.conversation_id))
        logger.debug("%s left conversation %s", sid, ref.conversation_id)

    # -- messages -------------------------------------------------------

    async def on_send_message(self, sid: str, data: Any) -> None:
        async def run() -> None:
            cmd = SendMessageIn.model_validate(data or {}).to_dto()
            identity = await self._identity(sid)
            if identity is not None and cmd.sender_id and cmd.sender_id != identity.subject_id:
                raise ForbiddenError("Sender does not match the connected participant.")
            async with self._uow_factory() as uow:
                await message_service.send_message(
                    cmd,
                    uow,
                    self._registry,
                    self.emitter,
                    push_conversation_updates=self._push_conversation_updates,
                )

        await self._guard(sid, "sendMessage", run, failure="Error processing your message.")

    async def on_edit_message(self, sid: str, data: Any) -> None:
        async def run() -> None:
            payload = EditMessageIn.model_validate(data or {})
            editor = await self._require_identity(sid)
            async with self._uow_factory() as uow:
                await message_service.edit_message(
                    payload.message_id, editor.subject_id, payload.content or "", uow, self.emitter,
                )

        await self._guard(sid, "editMessage", run, failure="Error editing your message.")

    async def on_delete_message(self, sid: str, data: Any) -> None:
        async def run() -> None:
            payload = DeleteMessageIn.model_validate(data or {})
            editor = await self._require_identity(sid)
            async with self._uow_factory() as uow:
                await message_service.delete_message(
                    payload.message_id, editor.subject_id, uow, self.emitter,
                )

        await self._guard(sid, "deleteMessage", run, failure="Error deleting your message.")

    async def on_mark_messages_as_read(self, sid: str, data: Any) -> None:
        reader = await self._identity(sid)
        ref = self._parse_quietly(sid, "markMessagesAsRead", ConversationRef.parse, data)
        if ref is None or reader is None:
            logger.error("markMessagesAsRead event missing data (sid=%s)", sid)
            return
        try:
            async with self._uow_factory() as uow:
                await read_state_service.mark_read(
                    ref.conversation_id, reader.subject_id, uow, self._registry, self.emitter,
                )
        except Exception:
            logger.exception("Error in markMessagesAsRead for %s", ref.conversation_id)

    async def on_react_to_message(self, sid: str, data: Any) -> None:
        async def run() -> None:
            payload = ReactIn.model_validate(data or {})
            reactor = await self._identity(sid)
            async with self._uow_factory() as uow:
                await reaction_service.react(
                    payload.message_id,
                    reactor.subject_id if reactor is not None else None,
                    payload.emoji,
                    uow,
                    self.emitter,
                )

        await self._guard(sid, "reactToMessage", run, failure="Error processing your reaction.")

    # -- signaling ------------------------------------------------------

    async def on_typing(self, sid: str, data: Any) -> None:
        await self._relay_typing(sid, data, is_typing=True)

    async def on_stop_typing(self, sid: str, data: Any) -> None:
        await self._relay_typing(sid, data, is_typing=False)

    async def _relay_typing(self, sid: str, data: Any, *, is_typing: bool) -> None:
        if await self._identity(sid) is None:
            return
        payload = self._parse_quietly(sid, "typing", TypingIn.model_validate, data)
        if payload is None:
            return
        await signaling_service.set_typing(sid, payload.to_dto(), is_typing, self.emitter)

    async def on_share_group_key(self, sid: str, data: Any) -> None:
        payload = self._parse_quietly(sid, "shareGroupKey", ShareGroupKeyIn.model_validate, data)
        if payload is None:
            return
        await signaling_service.share_group_key(payload.to_dto(), self._registry, self.emitter)

    # -- helpers --------------------------------------------------------

    async def _identity(self, sid: str) -> ParticipantKey | None:
        session = await self._sio.get_session(sid)
        return session.get(SESSION_KEY) if isinstance(session, dict) else None

    async def _require_identity(self, sid: str) -> ParticipantKey:
        identity = await self._identity(sid)
        if identity is None:
            raise ForbiddenError("Anonymous connections cannot do that.")
        return identity

    def _parse_quietly(
        self, sid: str, event: str, parse: Callable[[Any], T], data: Any
    ) -> T | None:
        try:
            return parse(data or {})
        except PayloadError:
            logger.warning("Invalid %s payload from %s", event, sid)
            return None

    async def _guard(
        self,
        sid: str,
        event: str,
        run: Callable[[], Awaitable[None]],
        *,
        failure: str,
    ) -> None:
        try:
            await run()
        except PayloadError as exc:
            await self._error(sid, "Invalid payload.", details=str(exc))
        except AppError as exc:
            await self._error(sid, exc.detail)
        except Exception as exc:
            logger.exception("Error handling %s from %s", event, sid)
            await self._error(sid, failure, details=str(exc))

    async def _error(self, sid: str, message: str, *, details: str | None = None) -> None:
        event = MessageErrorEvent(message=message, details=details)
        await self.emitter.to_channel(sid, "messageError", event.payload(exclude_none=True))
