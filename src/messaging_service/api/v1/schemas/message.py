from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class SendDirectMessageRequest(BaseModel):
    recipient_id: int
    content: str
    conversation_id: UUID | None = None


class SendGroupMessageRequest(BaseModel):
    conversation_id: UUID
    content: str


class MessageResponse(BaseModel):
    id: UUID
    conversation_id: UUID
    sender_id: int
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class MessagePageResponse(BaseModel):
    messages: list[MessageResponse]
    next_cursor: datetime | None = None
    next_cursor_id: UUID | None = None

    model_config = {"from_attributes": True}
