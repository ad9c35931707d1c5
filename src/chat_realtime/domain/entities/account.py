from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class AccountProfile:
    """Display fields of a user or admin account."""

    id: str
    full_name: str | None
    email: str | None
    profile_picture_url: str | None
    last_seen: datetime | None = None
