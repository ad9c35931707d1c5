"""Who is on the other end of a Socket.IO connection."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs

import jwt
from socketio.exceptions import ConnectionRefusedError

from chat_realtime.application.ports.auth import TokenVerifier
from chat_realtime.domain.value_objects.participant_key import ParticipantKey

logger = logging.getLogger(__name__)

_ANONYMOUS_IDS = {"", "null", "undefined"}


@dataclass(frozen=True, slots=True)
class Handshake:
    participant_id: str | None
    is_admin: bool
    token: str | None


def _query_params(environ: dict[str, Any]) -> dict[str, list[str]]:
    # python-socketio hands over either the ASGI scope, a WSGI environ, or a
    # dict wrapping the scope under "asgi.scope".
    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")
    return parse_qs(str(query_string), keep_blank_values=True)


def parse_handshake(environ: dict[str, Any], auth: Any | None = None) -> Handshake:
    """Read participantId/isAdmin/token from the query string, then ``auth``."""
    params = _query_params(environ)
    extra = auth if isinstance(auth, dict) else {}

    def pick(*names: str) -> str | None:
        for name in names:
            values = params.get(name)
            if values and values[0]:
                return values[0]
        for name in names:
            value = extra.get(name)
            if value is not None and value != "":
                return str(value)
        return None

    participant_id = pick("participantId", "userId")
    if participant_id is not None and participant_id.strip() in _ANONYMOUS_IDS:
        participant_id = None

    return Handshake(
        participant_id=participant_id,
        is_admin=(pick("isAdmin") or "").lower() == "true",
        token=pick("token"),
    )


async def resolve_identity(
    handshake: Handshake,
    verifier: TokenVerifier | None = None,
) -> ParticipantKey | None:
    """Turn a handshake into a registry key.

    Without a verifier the handshake is trusted and a missing id means an
    anonymous connection (None). With one, a valid token is mandatory and
    decides the identity.
    """
    if verifier is None:
        if handshake.participant_id is None:
            return None
        if handshake.is_admin:
            return ParticipantKey.admin(handshake.participant_id)
        return ParticipantKey.user(handshake.participant_id)

    if not handshake.token:
        raise ConnectionRefusedError("unauthorized")
    try:
        key = await verifier.verify(handshake.token)
    except jwt.ExpiredSignatureError as exc:
        raise ConnectionRefusedError("jwt_expired") from exc
    except jwt.InvalidTokenError as exc:
        logger.debug("Socket auth failed", exc_info=True)
        raise ConnectionRefusedError("unauthorized") from exc

    if handshake.participant_id is not None and handshake.participant_id != key.subject_id:
        logger.warning(
            "Handshake participantId %s does not match token subject %s",
            handshake.participant_id, key.subject_id,
        )
        raise ConnectionRefusedError("identity_mismatch")
    return key
