"""In-process registry of connected participants."""
from __future__ import annotations

import logging

from chat_realtime.domain.value_objects.participant_key import ParticipantKey

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Maps each connected participant to its current Socket.IO sid.

    One sid per participant: a second connection from the same identity
    replaces the first. A reverse index keeps disconnect handling O(1)
    since disconnect events only carry the sid.

    The registry is process-local. Several server processes would each see
    only their own connections.
    """

    def __init__(self) -> None:
        self._channels: dict[ParticipantKey, str] = {}
        self._keys: dict[str, ParticipantKey] = {}

    def register(self, key: ParticipantKey, sid: str) -> None:
        previous = self._channels.get(key)
        if previous is not None and previous != sid:
            self._keys.pop(previous, None)
        stale_key = self._keys.get(sid)
        if stale_key is not None and stale_key != key:
            self._channels.pop(stale_key, None)
        self._channels[key] = sid
        self._keys[sid] = key
        logger.debug("Registered %s -> %s (total=%d)", key.wire, sid, len(self._channels))

    def unregister(self, sid: str) -> ParticipantKey | None:
        """Drop the participant currently bound to ``sid``.

        Returns the removed key, or None when ``sid`` is not the current
        channel of anyone (anonymous, already removed, or replaced).
        """
        key = self._keys.pop(sid, None)
        if key is None:
            return None
        if self._channels.get(key) == sid:
            del self._channels[key]
        logger.debug("Unregistered %s (sid=%s)", key.wire, sid)
        return key

    def lookup(self, key: ParticipantKey) -> str | None:
        return self._channels.get(key)

    def key_for(self, sid: str) -> ParticipantKey | None:
        return self._keys.get(sid)

    def all_keys(self) -> set[ParticipantKey]:
        return set(self._channels)

    def clear(self) -> None:
        self._channels.clear()
        self._keys.clear()

    def __len__(self) -> int:
        return len(self._channels)
