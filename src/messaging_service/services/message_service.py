from __future__ import annotations

import logging
import uuid

from messaging_service.application.exceptions import (
    MissingConversationError,
    NotFoundError,
    ValidationError,
)
from messaging_service.application.policies.permissions import (
    assert_conversation_access,
    assert_group_member,
)
from messaging_service.application.ports.clock import Clock, system_clock
from messaging_service.application.uow import UnitOfWork
from messaging_service.domain.entities.conversation import Conversation
from messaging_service.domain.entities.message import Message
from messaging_service.domain.value_objects.enums import ConversationType
from messaging_service.services import conversation_service, conversation_update

logger = logging.getLogger(__name__)


def _require_content(content: str | None) -> str:
    if content is None or not content.strip():
        raise ValidationError("Message content is required")
    return content


async def append_message(
    conversation_id: uuid.UUID,
    sender_id: int,
    content: str | None,
    uow: UnitOfWork,
    clock: Clock = system_clock,
) -> Message:
    message = Message(
        id=uuid.uuid4(),
        conversation_id=conversation_id,
        sender_id=sender_id,
        content=_require_content(content),
        created_at=clock.now(),
    )
    return await uow.messages_w.append(message)


async def _deliver(
    conversation: Conversation,
    sender_id: int,
    content: str,
    uow: UnitOfWork,
    clock: Clock,
) -> Message:
    message = await append_message(conversation.id, sender_id, content, uow, clock)
    updated = await conversation_update.apply_message(conversation, message, uow)
    await uow.commit()
    logger.debug(
        "Message %s appended to conversation %s by user %s, unread now %s",
        message.id, conversation.id, sender_id, updated.unread_counts,
    )
    return message


async def _resolve_direct(
    sender_id: int,
    recipient_id: int | None,
    conversation_id: uuid.UUID | None,
    uow: UnitOfWork,
    clock: Clock,
) -> Conversation:
    if conversation_id is not None:
        conversation = await uow.conversations.get_by_id(conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation not found")
        assert_conversation_access(sender_id, conversation)
        if conversation.type != ConversationType.DIRECT:
            raise ValidationError("Conversation is not a direct conversation")
        if recipient_id is not None and not conversation.has_member(recipient_id):
            raise ValidationError("Recipient is not part of this conversation")
        return conversation

    if recipient_id is None:
        raise MissingConversationError("conversation_id or recipient_id is required")

    conversation, _created = await conversation_service.get_or_create_direct(
        sender_id, recipient_id, uow, clock,
    )
    return conversation


async def send_direct_message(
    sender_id: int,
    recipient_id: int | None,
    content: str | None,
    conversation_id: uuid.UUID | None,
    uow: UnitOfWork,
    clock: Clock = system_clock,
) -> Message:
    """Send to a direct conversation, creating it for a first contact.

    With ``conversation_id`` the conversation must exist (NotFoundError
    otherwise); without it the pair (sender, recipient) is resolved or
    created.
    """
    content = _require_content(content)
    conversation = await _resolve_direct(
        sender_id, recipient_id, conversation_id, uow, clock,
    )
    return await _deliver(conversation, sender_id, content, uow, clock)


async def send_group_message(
    sender_id: int,
    conversation_id: uuid.UUID,
    content: str | None,
    uow: UnitOfWork,
    clock: Clock = system_clock,
) -> Message:
    content = _require_content(content)
    conversation = assert_group_member(
        sender_id, await uow.conversations.get_by_id(conversation_id),
    )
    return await _deliver(conversation, sender_id, content, uow, clock)
