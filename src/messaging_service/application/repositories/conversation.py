from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from messaging_service.domain.entities.conversation import Conversation
from messaging_service.domain.entities.message import Message
from messaging_service.domain.entities.participant import Participant


class ConversationReader(Protocol):
    async def get_by_id(self, conversation_id: UUID) -> Conversation | None: ...

    async def find_direct_between(self, user_a: int, user_b: int) -> Conversation | None:
        """Symmetric lookup of the direct conversation for an unordered pair."""
        ...

    async def list_for_participant(self, user_id: int) -> list[Conversation]:
        """Newest activity first: last_message_at desc, then updated_at desc."""
        ...


class ConversationWriter(Protocol):
    async def create(self, conversation: Conversation) -> Conversation:
        """Insert. Raises ConflictError if a direct pair already exists."""
        ...

    async def apply_message(self, conversation_id: UUID, message: Message) -> None:
        """Record ``message`` as the last one, bump unread counters, clear seen_by."""
        ...

    async def mark_seen(
        self, conversation_id: UUID, user_id: int, ts: datetime
    ) -> Conversation:
        """Add user to seen_by (idempotent) and zero their unread counter."""
        ...

    async def add_participants(
        self, conversation_id: UUID, participants: list[Participant]
    ) -> None: ...
