from __future__ import annotations

from chat_realtime.domain.entities.conversation import Conversation
from chat_realtime.infrastructure.db.models.conversation import ConversationModel


def model_to_entity(model: ConversationModel) -> Conversation:
    return Conversation(
        id=model.id,
        participant_ids=tuple(p.user_id for p in model.participants),
        is_group_chat=model.is_group_chat,
        group_name=model.group_name,
        last_message_id=model.last_message_id,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
