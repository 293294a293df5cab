from __future__ import annotations

from fastapi import APIRouter

from messaging_service.api.deps import CurrentPrincipal, UoWDep
from messaging_service.api.v1.schemas.message import (
    MessageResponse,
    SendDirectMessageRequest,
    SendGroupMessageRequest,
)
from messaging_service.application.policies.permissions import assert_friends
from messaging_service.services import message_service

router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


@router.post("/direct", response_model=MessageResponse, status_code=201)
async def send_direct_message(
    body: SendDirectMessageRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> MessageResponse:
    await assert_friends(principal.user_id, body.recipient_id, uow.friendships)
    msg = await message_service.send_direct_message(
        principal.user_id,
        body.recipient_id,
        body.content,
        body.conversation_id,
        uow,
    )
    return MessageResponse.model_validate(msg, from_attributes=True)


@router.post("/group", response_model=MessageResponse, status_code=201)
async def send_group_message(
    body: SendGroupMessageRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> MessageResponse:
    msg = await message_service.send_group_message(
        principal.user_id, body.conversation_id, body.content, uow,
    )
    return MessageResponse.model_validate(msg, from_attributes=True)
