"""Side effects of a freshly appended message on its conversation."""
from __future__ import annotations

from messaging_service.application.uow import UnitOfWork
from messaging_service.domain.entities.conversation import Conversation
from messaging_service.domain.entities.message import Message


async def apply_message(
    conversation: Conversation,
    message: Message,
    uow: UnitOfWork,
) -> Conversation:
    """Update last_message, unread counters and seen_by for ``message``.

    Must be called after the message was appended and before the caller
    commits, so that the message and its summary become visible together.
    The writer uses in-place counter increments rather than rewriting the
    whole conversation, so concurrent senders do not overwrite each other's
    counts.
    """
    await uow.conversations_w.apply_message(conversation.id, message)
    return conversation.with_new_message(message)
