from __future__ import annotations

import logging
import uuid
from datetime import datetime

from messaging_service.application.dto.conversation import CreateConversationDTO
from messaging_service.application.dto.message import MessagePageDTO
from messaging_service.application.exceptions import (
    ConflictError,
    ValidationError,
)
from messaging_service.application.policies.permissions import assert_conversation_access
from messaging_service.application.ports.clock import Clock, system_clock
from messaging_service.application.uow import UnitOfWork
from messaging_service.domain.entities.conversation import Conversation, GroupInfo
from messaging_service.domain.entities.participant import Participant
from messaging_service.domain.value_objects.enums import ConversationType

logger = logging.getLogger(__name__)


def _new_conversation(
    conversation_type: ConversationType,
    member_ids: list[int],
    now: datetime,
    group: GroupInfo | None = None,
) -> Conversation:
    return Conversation(
        id=uuid.uuid4(),
        type=conversation_type,
        participants=tuple(Participant(user_id=uid, joined_at=now) for uid in member_ids),
        last_message_at=now,
        created_at=now,
        updated_at=now,
        group=group,
        unread_counts={uid: 0 for uid in member_ids},
    )


def _unique(ids: list[int]) -> list[int]:
    return list(dict.fromkeys(ids))


async def get_or_create_direct(
    user_id: int,
    peer_id: int,
    uow: UnitOfWork,
    clock: Clock = system_clock,
) -> tuple[Conversation, bool]:
    """Return the direct conversation for the pair, creating it if needed.

    Returns (conversation, created). Does not commit. A concurrent first
    contact that wins the insert surfaces as ConflictError from the writer;
    in that case the winner's conversation is looked up once and reused.
    """
    if user_id == peer_id:
        raise ValidationError("Cannot start a direct conversation with yourself")

    existing = await uow.conversations.find_direct_between(user_id, peer_id)
    if existing is not None:
        return existing, False

    conversation = _new_conversation(ConversationType.DIRECT, [user_id, peer_id], clock.now())
    try:
        conversation = await uow.conversations_w.create(conversation)
    except ConflictError:
        logger.info("Direct conversation %s<->%s created concurrently, reusing it", user_id, peer_id)
        existing = await uow.conversations.find_direct_between(user_id, peer_id)
        if existing is None:
            raise
        return existing, False

    logger.info("Created direct conversation %s for users %s, %s", conversation.id, user_id, peer_id)
    return conversation, True


async def create_conversation(
    requester_id: int,
    data: CreateConversationDTO,
    uow: UnitOfWork,
    clock: Clock = system_clock,
) -> Conversation:
    if not data.type:
        raise ValidationError("Conversation type is required")
    try:
        conversation_type = ConversationType(data.type)
    except ValueError:
        raise ValidationError(f"Invalid conversation type: {data.type}") from None
    if not data.member_ids:
        raise ValidationError("member_ids must not be empty")

    if conversation_type == ConversationType.DIRECT:
        conversation, created = await get_or_create_direct(
            requester_id, data.member_ids[0], uow, clock,
        )
        if created:
            await uow.commit()
        return conversation

    name = (data.group_name or "").strip()
    if not name:
        raise ValidationError("Group name is required")
    member_ids = _unique([requester_id, *data.member_ids])
    if len(member_ids) < 2:
        raise ValidationError("A group needs at least one other member")

    conversation = _new_conversation(
        ConversationType.GROUP,
        member_ids,
        clock.now(),
        group=GroupInfo(name=name, created_by=requester_id),
    )
    conversation = await uow.conversations_w.create(conversation)
    await uow.commit()
    logger.info("Created group conversation %s with %d members", conversation.id, len(member_ids))
    return conversation


async def list_conversations(
    user_id: int,
    uow: UnitOfWork,
    recipient_id: int | None = None,
) -> list[Conversation]:
    if recipient_id is not None:
        conversation = await uow.conversations.find_direct_between(user_id, recipient_id)
        return [conversation] if conversation else []
    return await uow.conversations.list_for_participant(user_id)


async def get_conversation(
    conversation_id: uuid.UUID,
    user_id: int,
    uow: UnitOfWork,
) -> Conversation:
    conversation = await uow.conversations.get_by_id(conversation_id)
    return assert_conversation_access(user_id, conversation)


async def get_messages(
    conversation_id: uuid.UUID,
    user_id: int,
    uow: UnitOfWork,
    limit: int = 50,
    cursor: datetime | None = None,
    cursor_id: uuid.UUID | None = None,
) -> MessagePageDTO:
    """Page backwards through history.

    Fetches ``limit + 1`` rows newest-first; the extra row, when present,
    only supplies ``next_cursor`` and ``next_cursor_id`` and is served as the
    first row of the next page (the cursor bound is inclusive). Passing the
    id back keeps pages disjoint when timestamps tie.
    """
    if limit < 1:
        raise ValidationError("limit must be positive")
    if cursor_id is not None and cursor is None:
        raise ValidationError("cursor_id requires cursor")
    conversation = await uow.conversations.get_by_id(conversation_id)
    assert_conversation_access(user_id, conversation)

    rows = await uow.messages.list_before(
        conversation_id, before=cursor, before_id=cursor_id, limit=limit + 1,
    )
    if len(rows) <= limit:
        return MessagePageDTO(messages=list(reversed(rows)), next_cursor=None)
    boundary = rows[limit]
    return MessagePageDTO(
        messages=list(reversed(rows[:limit])),
        next_cursor=boundary.created_at,
        next_cursor_id=boundary.id,
    )


async def add_group_members(
    conversation_id: uuid.UUID,
    requester_id: int,
    member_ids: list[int],
    uow: UnitOfWork,
    clock: Clock = system_clock,
) -> Conversation:
    conversation = await uow.conversations.get_by_id(conversation_id)
    conversation = assert_conversation_access(requester_id, conversation)
    if conversation.type != ConversationType.GROUP:
        raise ValidationError("Members can only be added to group conversations")

    now = clock.now()
    new_members = [
        Participant(user_id=uid, joined_at=now)
        for uid in _unique(member_ids)
        if not conversation.has_member(uid)
    ]
    if not new_members:
        return conversation

    await uow.conversations_w.add_participants(conversation_id, new_members)
    await uow.commit()
    return conversation.with_members(new_members)
