from __future__ import annotations

from fastapi import APIRouter, Request

from chat_realtime.api.v1.schemas import PresenceResponse
from chat_realtime.infrastructure.realtime.registry import ConnectionRegistry
from chat_realtime.services import presence_service

router = APIRouter(prefix="/api/v1/chat", tags=["presence"])


@router.get("/presence", response_model=PresenceResponse, response_model_by_alias=True)
async def presence(request: Request) -> PresenceResponse:
    registry: ConnectionRegistry = request.app.state.registry
    keys = registry.all_keys()
    admins = sum(1 for key in keys if key.is_admin)
    return PresenceResponse(
        active_users=presence_service.active_participants(registry),
        user_count=len(keys) - admins,
        admin_count=admins,
    )
