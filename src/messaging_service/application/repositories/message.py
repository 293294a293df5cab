from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from messaging_service.domain.entities.message import Message


class MessageReader(Protocol):
    async def list_before(
        self,
        conversation_id: UUID,
        *,
        before: datetime | None = None,
        before_id: UUID | None = None,
        limit: int = 50,
    ) -> list[Message]:
        """Newest-first by (created_at, id), at most ``limit`` rows.

        With ``before`` alone rows satisfy created_at <= before. With both,
        (created_at, id) <= (before, before_id), which stays exact when
        several messages share a timestamp.
        """
        ...


class MessageWriter(Protocol):
    async def append(self, message: Message) -> Message: ...
