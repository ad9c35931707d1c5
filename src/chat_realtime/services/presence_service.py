from __future__ import annotations

import logging
from datetime import datetime, timezone

from chat_realtime.application.ports.realtime import RealtimeEmitter
from chat_realtime.application.uow import UnitOfWork
from chat_realtime.domain.value_objects.participant_key import ParticipantKey
from chat_realtime.infrastructure.realtime.registry import ConnectionRegistry

logger = logging.getLogger(__name__)

ACTIVE_USERS_EVENT = "activeUsers"


def active_participants(registry: ConnectionRegistry) -> list[str]:
    """Wire keys of everyone connected, admins carrying their prefix."""
    return sorted(key.wire for key in registry.all_keys())


async def broadcast_active(registry: ConnectionRegistry, emitter: RealtimeEmitter) -> None:
    await emitter.to_all(ACTIVE_USERS_EVENT, active_participants(registry))


async def participant_connected(
    sid: str,
    key: ParticipantKey,
    registry: ConnectionRegistry,
    emitter: RealtimeEmitter,
) -> None:
    registry.register(key, sid)
    logger.info("%s %s connected with sid %s", key.kind, key.subject_id, sid)
    await broadcast_active(registry, emitter)


async def participant_disconnected(
    sid: str,
    registry: ConnectionRegistry,
    emitter: RealtimeEmitter,
    uow: UnitOfWork,
) -> ParticipantKey | None:
    """Remove ``sid`` from the registry, broadcast presence and record last-seen.

    A failed last-seen write is logged and otherwise ignored.
    """
    key = registry.unregister(sid)
    if key is None:
        return None

    await broadcast_active(registry, emitter)

    try:
        await uow.accounts_w.touch_last_seen(key.kind, key.subject_id, datetime.now(timezone.utc))
        await uow.commit()
    except Exception:
        logger.exception("Failed to update last_seen for %s %s", key.kind, key.subject_id)
    else:
        logger.info("%s %s disconnected, last_seen updated", key.kind, key.subject_id)
    return key
