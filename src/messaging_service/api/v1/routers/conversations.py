from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Query

from messaging_service.api.deps import CurrentPrincipal, UoWDep
from messaging_service.api.v1.schemas.conversation import (
    AddMembersRequest,
    ConversationResponse,
    CreateConversationRequest,
    SeenStateResponse,
)
from messaging_service.api.v1.schemas.message import MessagePageResponse
from messaging_service.application.dto.conversation import CreateConversationDTO
from messaging_service.application.policies.permissions import assert_friends
from messaging_service.config import settings
from messaging_service.domain.value_objects.enums import ConversationType
from messaging_service.services import conversation_service, seen_service

router = APIRouter(prefix="/api/v1/conversations", tags=["conversations"])


@router.post("", response_model=ConversationResponse, status_code=201)
async def create_conversation(
    body: CreateConversationRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ConversationResponse:
    if body.type == ConversationType.DIRECT:
        await assert_friends(principal.user_id, body.member_ids[0], uow.friendships)
    conv = await conversation_service.create_conversation(
        principal.user_id,
        CreateConversationDTO(
            type=body.type,
            member_ids=body.member_ids,
            group_name=body.group_name,
        ),
        uow,
    )
    return ConversationResponse.model_validate(conv, from_attributes=True)


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(
    principal: CurrentPrincipal,
    uow: UoWDep,
    recipient_id: int | None = Query(None),
) -> list[ConversationResponse]:
    convs = await conversation_service.list_conversations(
        principal.user_id, uow, recipient_id=recipient_id,
    )
    return [ConversationResponse.model_validate(c, from_attributes=True) for c in convs]


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ConversationResponse:
    conv = await conversation_service.get_conversation(conversation_id, principal.user_id, uow)
    return ConversationResponse.model_validate(conv, from_attributes=True)


@router.get("/{conversation_id}/messages", response_model=MessagePageResponse)
async def get_messages(
    conversation_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
    limit: int = Query(settings.MESSAGES_PAGE_LIMIT, ge=1, le=settings.MESSAGES_PAGE_MAX),
    cursor: datetime | None = Query(None),
    cursor_id: UUID | None = Query(None),
) -> MessagePageResponse:
    page = await conversation_service.get_messages(
        conversation_id, principal.user_id, uow,
        limit=limit, cursor=cursor, cursor_id=cursor_id,
    )
    return MessagePageResponse.model_validate(page, from_attributes=True)


@router.patch("/{conversation_id}/seen", response_model=SeenStateResponse)
async def mark_as_seen(
    conversation_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> SeenStateResponse:
    state = await seen_service.mark_as_seen(conversation_id, principal.user_id, uow)
    return SeenStateResponse.model_validate(state, from_attributes=True)


@router.post("/{conversation_id}/members", response_model=ConversationResponse)
async def add_members(
    conversation_id: UUID,
    body: AddMembersRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ConversationResponse:
    conv = await conversation_service.add_group_members(
        conversation_id, principal.user_id, body.member_ids, uow,
    )
    return ConversationResponse.model_validate(conv, from_attributes=True)
