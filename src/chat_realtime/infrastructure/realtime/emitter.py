from __future__ import annotations

from typing import Any

import socketio


class SocketIOEmitter:
    """Implements application.ports.realtime.RealtimeEmitter on a python-socketio server."""

    def __init__(self, sio: socketio.AsyncServer) -> None:
        self._sio = sio

    async def to_room(
        self,
        room: str,
        event: str,
        data: Any,
        *,
        skip_sid: str | None = None,
    ) -> None:
        await self._sio.emit(event, data, room=room, skip_sid=skip_sid)

    async def to_channel(self, sid: str, event: str, data: Any) -> None:
        await self._sio.emit(event, data, to=sid)

    async def to_all(self, event: str, data: Any) -> None:
        await self._sio.emit(event, data)
