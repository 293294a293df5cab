from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from messaging_service.domain.value_objects.enums import ConversationType


class CreateConversationRequest(BaseModel):
    type: ConversationType
    member_ids: list[int] = Field(min_length=1)
    group_name: str | None = None


class AddMembersRequest(BaseModel):
    member_ids: list[int] = Field(min_length=1)


class ParticipantResponse(BaseModel):
    user_id: int
    joined_at: datetime

    model_config = {"from_attributes": True}


class GroupResponse(BaseModel):
    name: str
    created_by: int

    model_config = {"from_attributes": True}


class LastMessageResponse(BaseModel):
    id: UUID
    content: str
    sender_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ConversationResponse(BaseModel):
    id: UUID
    type: ConversationType
    participants: list[ParticipantResponse]
    group: GroupResponse | None
    last_message: LastMessageResponse | None
    last_message_at: datetime
    unread_counts: dict[int, int]
    seen_by: list[int]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SeenStateResponse(BaseModel):
    seen_by: list[int]
    my_unread_count: int

    model_config = {"from_attributes": True}
