from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from uuid import UUID

from messaging_service.domain.entities.conversation import Conversation, GroupInfo, LastMessage
from messaging_service.domain.entities.participant import Participant
from messaging_service.infrastructure.db.models.conversation import ConversationModel
from messaging_service.infrastructure.db.models.participant import ParticipantModel


def model_to_entity(model: ConversationModel) -> Conversation:
    members: list[ParticipantModel] = list(model.participants)
    seen = sorted((p for p in members if p.seen_at is not None), key=lambda p: p.seen_at)

    last_message = None
    if model.last_message_id is not None:
        last_message = LastMessage(
            id=model.last_message_id,
            content=model.last_message_content or "",
            sender_id=model.last_message_sender_id,  # type: ignore[arg-type]
            created_at=model.last_message_at,
        )

    group = None
    if model.group_name is not None:
        group = GroupInfo(name=model.group_name, created_by=model.group_created_by)  # type: ignore[arg-type]

    return Conversation(
        id=model.id,
        type=model.type,
        participants=tuple(
            Participant(user_id=p.user_id, joined_at=p.joined_at) for p in members
        ),
        last_message_at=model.last_message_at,
        created_at=model.created_at,
        updated_at=model.updated_at,
        group=group,
        last_message=last_message,
        unread_counts={p.user_id: p.unread_count for p in members},
        seen_by=tuple(p.user_id for p in seen),
    )


def entity_to_model(entity: Conversation) -> ConversationModel:
    return ConversationModel(
        id=entity.id,
        type=entity.type,
        direct_key=entity.direct_key,
        group_name=entity.group.name if entity.group else None,
        group_created_by=entity.group.created_by if entity.group else None,
        last_message_id=entity.last_message.id if entity.last_message else None,
        last_message_content=entity.last_message.content if entity.last_message else None,
        last_message_sender_id=entity.last_message.sender_id if entity.last_message else None,
        last_message_at=entity.last_message_at,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )


def participant_rows(
    conversation_id: UUID, participants: Iterable[Participant]
) -> list[dict[str, Any]]:
    """Insert values for new members; counters start at zero, nothing seen yet."""
    return [
        {
            "conversation_id": conversation_id,
            "user_id": p.user_id,
            "joined_at": p.joined_at,
            "unread_count": 0,
        }
        for p in participants
    ]
