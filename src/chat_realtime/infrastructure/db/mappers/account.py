from __future__ import annotations

from chat_realtime.domain.entities.account import AccountProfile
from chat_realtime.infrastructure.db.models.account import UserModel


def user_to_entity(model: UserModel) -> AccountProfile:
    return AccountProfile(
        id=model.id,
        full_name=model.full_name,
        email=model.email,
        profile_picture_url=model.profile_picture_url,
        last_seen=model.last_seen,
    )
