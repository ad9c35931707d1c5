"""Import all models so Base.metadata sees every table."""
from chat_realtime.infrastructure.db.models.account import AdminModel, UserModel
from chat_realtime.infrastructure.db.models.conversation import (
    ConversationModel,
    ConversationParticipantModel,
)
from chat_realtime.infrastructure.db.models.message import MessageModel

__all__ = [
    "AdminModel",
    "ConversationModel",
    "ConversationParticipantModel",
    "MessageModel",
    "UserModel",
]
