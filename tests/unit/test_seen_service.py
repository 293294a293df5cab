from __future__ import annotations

import uuid

import pytest

from messaging_service.application.exceptions import ForbiddenError, NotFoundError
from messaging_service.domain.value_objects.enums import ConversationType
from messaging_service.services import message_service, seen_service
from tests.conftest import FakeUoW, make_conversation


@pytest.fixture
def group_uow():
    uow = FakeUoW()
    conv = uow.add(make_conversation(member_ids=[1, 2, 3], conversation_type=ConversationType.GROUP))
    return uow, conv


@pytest.mark.asyncio
async def test_group_seen_flow(group_uow, clock):
    uow, conv = group_uow
    await message_service.send_group_message(1, conv.id, "hello all", uow, clock)

    state = await seen_service.mark_as_seen(conv.id, 2, uow, clock)

    assert state.seen_by == [2]
    assert state.my_unread_count == 0
    stored = uow.stored(conv.id)
    assert stored.unread_counts == {1: 0, 2: 0, 3: 1}

    state = await seen_service.mark_as_seen(conv.id, 3, uow, clock)
    assert state.seen_by == [2, 3]

    await message_service.send_group_message(3, conv.id, "hi", uow, clock)
    assert uow.stored(conv.id).seen_by == ()


@pytest.mark.asyncio
async def test_mark_seen_twice_is_idempotent(group_uow, clock):
    uow, conv = group_uow
    await message_service.send_group_message(1, conv.id, "hello", uow, clock)

    first = await seen_service.mark_as_seen(conv.id, 2, uow, clock)
    second = await seen_service.mark_as_seen(conv.id, 2, uow, clock)

    assert first == second
    assert uow.stored(conv.id).seen_by == (2,)


@pytest.mark.asyncio
async def test_sender_marking_own_message_is_noop(group_uow, clock):
    uow, conv = group_uow
    await message_service.send_group_message(1, conv.id, "hello", uow, clock)
    uow._committed = False

    state = await seen_service.mark_as_seen(conv.id, 1, uow, clock)

    assert state.seen_by == []
    assert state.my_unread_count == 0
    assert uow._committed is False
    assert uow.stored(conv.id).seen_by == ()


@pytest.mark.asyncio
async def test_no_messages_is_noop(group_uow, clock):
    uow, conv = group_uow

    state = await seen_service.mark_as_seen(conv.id, 2, uow, clock)

    assert state.seen_by == []
    assert uow._committed is False


@pytest.mark.asyncio
async def test_mark_seen_access_checks(group_uow, clock):
    uow, conv = group_uow
    with pytest.raises(NotFoundError):
        await seen_service.mark_as_seen(uuid.uuid4(), 2, uow, clock)
    with pytest.raises(ForbiddenError):
        await seen_service.mark_as_seen(conv.id, 7, uow, clock)
