from __future__ import annotations

from dataclasses import dataclass

from chat_realtime.domain.value_objects.enums import ParticipantKind

ADMIN_WIRE_PREFIX = "admin_"


@dataclass(frozen=True, slots=True)
class ParticipantKey:
    """Identity of a connected participant, tagged with its account kind.

    Users and admins share one id space, so the kind is part of the key.
    Only the wire rendering sent to clients carries a textual prefix.
    """

    kind: ParticipantKind
    subject_id: str

    @classmethod
    def user(cls, subject_id: str) -> ParticipantKey:
        return cls(kind=ParticipantKind.USER, subject_id=subject_id)

    @classmethod
    def admin(cls, subject_id: str) -> ParticipantKey:
        return cls(kind=ParticipantKind.ADMIN, subject_id=subject_id)

    @property
    def is_admin(self) -> bool:
        return self.kind == ParticipantKind.ADMIN

    @property
    def wire(self) -> str:
        if self.is_admin:
            return f"{ADMIN_WIRE_PREFIX}{self.subject_id}"
        return self.subject_id
