from __future__ import annotations

import logging
import uuid

import pytest

from messaging_service.application.exceptions import (
    ForbiddenError,
    MissingConversationError,
    NotFoundError,
    ValidationError,
)
from messaging_service.domain.value_objects.enums import ConversationType
from messaging_service.services import message_service
from tests.conftest import FakeUoW, make_conversation


@pytest.mark.asyncio
async def test_first_contact_creates_conversation(clock):
    uow = FakeUoW()

    msg = await message_service.send_direct_message(1, 2, "hi", None, uow, clock)

    conv = uow.stored(msg.conversation_id)
    assert conv.type == ConversationType.DIRECT
    assert sorted(conv.member_ids) == [1, 2]
    assert conv.unread_counts == {1: 0, 2: 1}
    assert conv.last_message.id == msg.id
    assert conv.last_message.content == "hi"
    assert conv.last_message_at == msg.created_at
    assert conv.updated_at == msg.created_at
    assert uow.messages._messages == [msg]
    assert uow._committed is True


@pytest.mark.asyncio
async def test_reply_reuses_conversation_and_clears_seen(clock):
    uow = FakeUoW()
    first = await message_service.send_direct_message(1, 2, "hi", None, uow, clock)
    uow.conversations._store[first.conversation_id] = uow.stored(first.conversation_id).with_seen(2)

    reply = await message_service.send_direct_message(2, 1, "hey", None, uow, clock)

    conv = uow.stored(first.conversation_id)
    assert reply.conversation_id == first.conversation_id
    assert conv.seen_by == ()
    assert conv.unread_counts == {1: 1, 2: 0}
    assert len(uow.conversations._store) == 1


@pytest.mark.asyncio
async def test_explicit_conversation_id(clock):
    uow = FakeUoW()
    conv = uow.add(make_conversation(member_ids=[1, 2]))

    msg = await message_service.send_direct_message(1, 2, "yo", conv.id, uow, clock)

    assert msg.conversation_id == conv.id
    assert uow.stored(conv.id).unread_for(2) == 1


@pytest.mark.asyncio
async def test_unknown_conversation_id_is_not_found(clock):
    uow = FakeUoW()
    with pytest.raises(NotFoundError):
        await message_service.send_direct_message(1, 2, "yo", uuid.uuid4(), uow, clock)
    assert uow.messages._messages == []
    assert uow._committed is False


@pytest.mark.asyncio
async def test_conversation_id_must_match_recipient(clock):
    uow = FakeUoW()
    conv = uow.add(make_conversation(member_ids=[1, 3]))
    with pytest.raises(ValidationError):
        await message_service.send_direct_message(1, 2, "yo", conv.id, uow, clock)


@pytest.mark.asyncio
async def test_outsider_cannot_use_conversation_id(clock):
    uow = FakeUoW()
    conv = uow.add(make_conversation(member_ids=[2, 3]))
    with pytest.raises(ForbiddenError):
        await message_service.send_direct_message(1, 2, "yo", conv.id, uow, clock)


@pytest.mark.asyncio
async def test_direct_send_to_group_rejected(clock):
    uow = FakeUoW()
    conv = uow.add(make_conversation(member_ids=[1, 2, 3], conversation_type=ConversationType.GROUP))
    with pytest.raises(ValidationError):
        await message_service.send_direct_message(1, 2, "yo", conv.id, uow, clock)


@pytest.mark.asyncio
async def test_missing_conversation_and_recipient(clock):
    with pytest.raises(MissingConversationError):
        await message_service.send_direct_message(1, None, "yo", None, FakeUoW(), clock)


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [None, "", "   \n"])
async def test_empty_content_rejected(content, clock):
    uow = FakeUoW()
    with pytest.raises(ValidationError):
        await message_service.send_direct_message(1, 2, content, None, uow, clock)
    assert uow.conversations._store == {}


@pytest.mark.asyncio
async def test_group_message_updates_counters(clock):
    uow = FakeUoW()
    conv = uow.add(make_conversation(member_ids=[1, 2, 3], conversation_type=ConversationType.GROUP))

    await message_service.send_group_message(1, conv.id, "a", uow, clock)
    msg = await message_service.send_group_message(2, conv.id, "b", uow, clock)

    stored = uow.stored(conv.id)
    assert stored.unread_counts == {1: 1, 2: 0, 3: 2}
    assert stored.last_message.sender_id == 2
    assert stored.last_message_at == msg.created_at


@pytest.mark.asyncio
async def test_group_message_unknown_conversation(clock):
    with pytest.raises(NotFoundError):
        await message_service.send_group_message(1, uuid.uuid4(), "a", FakeUoW(), clock)


@pytest.mark.asyncio
async def test_group_message_from_outsider(clock):
    uow = FakeUoW()
    conv = uow.add(make_conversation(member_ids=[1, 2, 3], conversation_type=ConversationType.GROUP))
    with pytest.raises(ForbiddenError):
        await message_service.send_group_message(9, conv.id, "a", uow, clock)


@pytest.mark.asyncio
async def test_group_send_to_direct_rejected(clock):
    uow = FakeUoW()
    conv = uow.add(make_conversation(member_ids=[1, 2]))
    with pytest.raises(ForbiddenError):
        await message_service.send_group_message(1, conv.id, "a", uow, clock)


@pytest.mark.asyncio
async def test_group_send_loads_conversation_once(clock):
    uow = FakeUoW()
    conv = uow.add(make_conversation(member_ids=[1, 2], conversation_type=ConversationType.GROUP))

    await message_service.send_group_message(1, conv.id, "a", uow, clock)

    assert uow.conversations._get_calls == 1


@pytest.mark.asyncio
async def test_delivery_logs_updated_counters(clock, caplog):
    uow = FakeUoW()
    caplog.set_level(logging.DEBUG, logger="messaging_service.services.message_service")

    await message_service.send_direct_message(1, 2, "hi", None, uow, clock)

    assert "unread now {1: 0, 2: 1}" in caplog.text
