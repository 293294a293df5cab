from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from messaging_service.domain.entities.message import Message


@dataclass(frozen=True, slots=True)
class MessagePageDTO:
    """One page of history, oldest-first, plus the cursor for the page before it.

    ``next_cursor`` is the timestamp of the first record not served;
    ``next_cursor_id`` is its id and breaks ties between equal timestamps.
    """

    messages: list[Message]
    next_cursor: datetime | None
    next_cursor_id: UUID | None = None
