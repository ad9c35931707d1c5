from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chat_realtime.api.v1.routers import health, presence
from chat_realtime.application.ports.auth import TokenVerifier
from chat_realtime.config import settings
from chat_realtime.infrastructure.auth.hs256_verifier import HS256Verifier
from chat_realtime.infrastructure.db.session import engine
from chat_realtime.infrastructure.db.uow import open_uow
from chat_realtime.infrastructure.realtime.gateway import ChatGateway
from chat_realtime.infrastructure.realtime.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    logger.info("Realtime chat service started (socket.io path=/%s)", settings.SOCKETIO_PATH)

    yield

    registry: ConnectionRegistry = app.state.registry
    logger.info("Shutting down, dropping %d registered connections", len(registry))
    registry.clear()
    await engine.dispose()


def _get_verifier() -> TokenVerifier | None:
    if not settings.SOCKET_REQUIRE_TOKEN:
        return None
    assert settings.JWT_SECRET, "JWT_SECRET must be set when SOCKET_REQUIRE_TOKEN is on"
    return HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)


def create_app() -> socketio.ASGIApp:
    api = FastAPI(
        title="Chat Realtime Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    api.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    sio = socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=settings.socketio_cors_origins,
        ping_interval=settings.SOCKETIO_PING_INTERVAL,
        ping_timeout=settings.SOCKETIO_PING_TIMEOUT,
        logger=False,
        engineio_logger=False,
    )
    registry = ConnectionRegistry()
    gateway = ChatGateway(
        sio,
        registry,
        open_uow,
        verifier=_get_verifier(),
        push_conversation_updates=settings.PUSH_CONVERSATION_UPDATES,
    )
    gateway.register()

    api.state.registry = registry
    api.state.sio = sio

    api.include_router(health.router)
    api.include_router(presence.router)

    return socketio.ASGIApp(sio, other_asgi_app=api, socketio_path=settings.SOCKETIO_PATH)
