"""Import all models so Base.metadata sees every table."""
from messaging_service.infrastructure.db.models.conversation import ConversationModel
from messaging_service.infrastructure.db.models.friendship import FriendshipModel
from messaging_service.infrastructure.db.models.message import MessageModel
from messaging_service.infrastructure.db.models.participant import ParticipantModel

__all__ = [
    "ConversationModel",
    "FriendshipModel",
    "MessageModel",
    "ParticipantModel",
]
