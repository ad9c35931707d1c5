from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PresenceResponse(BaseModel):
    active_users: list[str]
    user_count: int
    admin_count: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
