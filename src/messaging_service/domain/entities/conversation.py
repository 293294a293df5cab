from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import UUID

from messaging_service.domain.entities.message import Message
from messaging_service.domain.entities.participant import Participant
from messaging_service.domain.value_objects.enums import ConversationType


def direct_key(user_a: int, user_b: int) -> str:
    """Order-independent key for a direct pair."""
    low, high = sorted((user_a, user_b))
    return f"{low}:{high}"


@dataclass(frozen=True, slots=True)
class LastMessage:
    id: UUID
    content: str
    sender_id: int
    created_at: datetime


@dataclass(frozen=True, slots=True)
class GroupInfo:
    name: str
    created_by: int


@dataclass(frozen=True, slots=True)
class Conversation:
    id: UUID
    type: str
    participants: tuple[Participant, ...]
    last_message_at: datetime
    created_at: datetime
    updated_at: datetime
    group: GroupInfo | None = None
    last_message: LastMessage | None = None
    unread_counts: dict[int, int] = field(default_factory=dict)
    seen_by: tuple[int, ...] = ()

    @property
    def member_ids(self) -> list[int]:
        return [p.user_id for p in self.participants]

    @property
    def direct_key(self) -> str | None:
        if self.type != ConversationType.DIRECT:
            return None
        return direct_key(*self.member_ids)

    def has_member(self, user_id: int) -> bool:
        return any(p.user_id == user_id for p in self.participants)

    def unread_for(self, user_id: int) -> int:
        return self.unread_counts.get(user_id, 0)

    def with_new_message(self, message: Message) -> Conversation:
        """Return the conversation as it looks right after ``message`` was appended.

        ``seen_by`` is cleared, the sender's counter is zeroed and every other
        participant's counter goes up by one. A message older than the current
        last message (a concurrent send that committed late) leaves the summary
        fields untouched.
        """
        counts = {
            p.user_id: 0 if p.user_id == message.sender_id else self.unread_for(p.user_id) + 1
            for p in self.participants
        }
        if self.last_message is not None and message.created_at < self.last_message_at:
            return replace(self, seen_by=(), unread_counts=counts)
        return replace(
            self,
            seen_by=(),
            last_message_at=message.created_at,
            last_message=LastMessage(
                id=message.id,
                content=message.content,
                sender_id=message.sender_id,
                created_at=message.created_at,
            ),
            unread_counts=counts,
            updated_at=message.created_at,
        )

    def with_seen(self, user_id: int) -> Conversation:
        seen_by = self.seen_by if user_id in self.seen_by else (*self.seen_by, user_id)
        return replace(
            self,
            seen_by=seen_by,
            unread_counts={**self.unread_counts, user_id: 0},
        )

    def with_members(self, members: list[Participant]) -> Conversation:
        new = [m for m in members if not self.has_member(m.user_id)]
        counts = dict(self.unread_counts)
        for m in new:
            counts[m.user_id] = 0
        return replace(
            self,
            participants=(*self.participants, *new),
            unread_counts=counts,
        )
