from __future__ import annotations

from enum import StrEnum


class ParticipantKind(StrEnum):
    USER = "user"
    ADMIN = "admin"


class MessageStatus(StrEnum):
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
