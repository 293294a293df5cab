from __future__ import annotations

from messaging_service.application.exceptions import ForbiddenError, NotFoundError
from messaging_service.application.ports.identity import FriendshipReader
from messaging_service.domain.entities.conversation import Conversation
from messaging_service.domain.value_objects.enums import ConversationType


def assert_conversation_access(
    user_id: int,
    conversation: Conversation | None,
) -> Conversation:
    """Raise if conversation doesn't exist or the user is not a participant."""
    if conversation is None:
        raise NotFoundError("Conversation not found")
    if not conversation.has_member(user_id):
        raise ForbiddenError("Not a participant of this conversation")
    return conversation


def assert_group_member(
    user_id: int,
    conversation: Conversation | None,
) -> Conversation:
    conversation = assert_conversation_access(user_id, conversation)
    if conversation.type != ConversationType.GROUP:
        raise ForbiddenError("Not a group conversation")
    return conversation


async def assert_friends(
    user_id: int,
    other_id: int,
    friendships: FriendshipReader,
) -> None:
    if not await friendships.are_friends(user_id, other_id):
        raise ForbiddenError("Users are not friends")
