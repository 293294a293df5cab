"""Shared test fixtures and in-memory fakes."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from messaging_service.application.exceptions import ConflictError
from messaging_service.domain.entities.conversation import Conversation, GroupInfo
from messaging_service.domain.entities.message import Message
from messaging_service.domain.entities.participant import Participant
from messaging_service.domain.value_objects.enums import ConversationType

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class StepClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start: datetime = EPOCH, step: timedelta = timedelta(seconds=1)) -> None:
        self._current = start
        self._step = step

    def now(self) -> datetime:
        self._current += self._step
        return self._current


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


def make_conversation(
    *,
    member_ids: tuple[int, ...] | list[int] = (1, 2),
    conversation_type: str = ConversationType.DIRECT,
    conversation_id: UUID | None = None,
    group_name: str = "Book club",
    created_at: datetime = EPOCH,
) -> Conversation:
    group = None
    if conversation_type == ConversationType.GROUP:
        group = GroupInfo(name=group_name, created_by=member_ids[0])
    return Conversation(
        id=conversation_id or uuid.uuid4(),
        type=conversation_type,
        participants=tuple(Participant(user_id=uid, joined_at=created_at) for uid in member_ids),
        last_message_at=created_at,
        created_at=created_at,
        updated_at=created_at,
        group=group,
        unread_counts={uid: 0 for uid in member_ids},
    )


def make_message(
    *,
    conversation_id: UUID,
    sender_id: int = 1,
    content: str = "hello",
    created_at: datetime = EPOCH,
) -> Message:
    return Message(
        id=uuid.uuid4(),
        conversation_id=conversation_id,
        sender_id=sender_id,
        content=content,
        created_at=created_at,
    )


@dataclass
class FakeConversationReader:
    _store: dict[UUID, Conversation] = field(default_factory=dict)
    _get_calls: int = 0

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        self._get_calls += 1
        return self._store.get(conversation_id)

    async def find_direct_between(self, user_a: int, user_b: int) -> Conversation | None:
        wanted = {user_a, user_b}
        for c in self._store.values():
            if c.type == ConversationType.DIRECT and set(c.member_ids) == wanted:
                return c
        return None

    async def list_for_participant(self, user_id: int) -> list[Conversation]:
        mine = [c for c in self._store.values() if c.has_member(user_id)]
        return sorted(mine, key=lambda c: (c.last_message_at, c.updated_at), reverse=True)


@dataclass
class FakeConversationWriter:
    _reader: FakeConversationReader
    # Simulates a concurrent first contact winning the insert race.
    _race_winner: Conversation | None = None

    async def create(self, conversation: Conversation) -> Conversation:
        if self._race_winner is not None:
            self._reader._store[self._race_winner.id] = self._race_winner
            self._race_winner = None
        key = conversation.direct_key
        if key is not None and any(c.direct_key == key for c in self._reader._store.values()):
            raise ConflictError("Direct conversation already exists")
        self._reader._store[conversation.id] = conversation
        return conversation

    async def apply_message(self, conversation_id: UUID, message: Message) -> None:
        current = self._reader._store[conversation_id]
        self._reader._store[conversation_id] = current.with_new_message(message)

    async def mark_seen(self, conversation_id: UUID, user_id: int, ts: datetime) -> Conversation:
        updated = self._reader._store[conversation_id].with_seen(user_id)
        self._reader._store[conversation_id] = updated
        return updated

    async def add_participants(self, conversation_id: UUID, participants: list[Participant]) -> None:
        current = self._reader._store[conversation_id]
        self._reader._store[conversation_id] = current.with_members(participants)


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def list_before(
        self,
        conversation_id: UUID,
        *,
        before: datetime | None = None,
        before_id: UUID | None = None,
        limit: int = 50,
    ) -> list[Message]:
        rows = [m for m in self._messages if m.conversation_id == conversation_id]
        if before is not None and before_id is not None:
            rows = [m for m in rows if (m.created_at, m.id) <= (before, before_id)]
        elif before is not None:
            rows = [m for m in rows if m.created_at <= before]
        rows.sort(key=lambda m: (m.created_at, m.id), reverse=True)
        return rows[:limit]


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader

    async def append(self, message: Message) -> Message:
        self._reader._messages.append(message)
        return message


@dataclass
class FakeFriendshipReader:
    _pairs: set[frozenset[int]] = field(default_factory=set)

    def befriend(self, user_a: int, user_b: int) -> None:
        self._pairs.add(frozenset((user_a, user_b)))

    async def are_friends(self, user_a: int, user_b: int) -> bool:
        return frozenset((user_a, user_b)) in self._pairs


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    conversations: FakeConversationReader = field(default_factory=FakeConversationReader)
    conversations_w: FakeConversationWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    friendships: FakeFriendshipReader = field(default_factory=FakeFriendshipReader)
    _committed: bool = False

    def __post_init__(self) -> None:
        if self.conversations_w is None:
            self.conversations_w = FakeConversationWriter(self.conversations)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    def add(self, conversation: Conversation) -> Conversation:
        self.conversations._store[conversation.id] = conversation
        return conversation

    def stored(self, conversation_id: UUID) -> Conversation:
        return self.conversations._store[conversation_id]

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        pass
