from __future__ import annotations

import jwt

from chat_realtime.domain.value_objects.enums import ParticipantKind
from chat_realtime.domain.value_objects.participant_key import ParticipantKey


class HS256Verifier:
    """Verify access tokens signed with the shared secret of the HTTP auth layer.

    Accepts either a ``kind`` claim or the ``isAdmin`` flag the admin login
    issues.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    async def verify(self, token: str) -> ParticipantKey:
        payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        subject = payload.get("sub") or payload.get("id")
        if not subject:
            raise jwt.InvalidTokenError("Token carries no subject")
        kind_raw = payload.get("kind")
        if kind_raw in ParticipantKind.__members__.values():
            kind = ParticipantKind(kind_raw)
        elif payload.get("isAdmin") is True:
            kind = ParticipantKind.ADMIN
        else:
            kind = ParticipantKind.USER
        return ParticipantKey(kind=kind, subject_id=str(subject))
