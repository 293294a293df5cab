from __future__ import annotations

import logging
import uuid

from messaging_service.application.dto.conversation import SeenStateDTO
from messaging_service.application.policies.permissions import assert_conversation_access
from messaging_service.application.ports.clock import Clock, system_clock
from messaging_service.application.uow import UnitOfWork

logger = logging.getLogger(__name__)


async def mark_as_seen(
    conversation_id: uuid.UUID,
    user_id: int,
    uow: UnitOfWork,
    clock: Clock = system_clock,
) -> SeenStateDTO:
    """Mark the conversation's last message as seen by ``user_id``.

    Nothing is written when there is no message yet or when the user sent
    the last message themselves.
    """
    conversation = await uow.conversations.get_by_id(conversation_id)
    conversation = assert_conversation_access(user_id, conversation)

    last = conversation.last_message
    if last is None or last.sender_id == user_id:
        return SeenStateDTO(
            seen_by=list(conversation.seen_by),
            my_unread_count=conversation.unread_for(user_id),
        )

    updated = await uow.conversations_w.mark_seen(conversation_id, user_id, clock.now())
    await uow.commit()
    logger.debug("Conversation %s seen by user %s", conversation_id, user_id)
    return SeenStateDTO(
        seen_by=list(updated.seen_by),
        my_unread_count=updated.unread_for(user_id),
    )
