from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import case, func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from messaging_service.application.exceptions import ConflictError, NotFoundError
from messaging_service.domain.entities.conversation import Conversation, direct_key
from messaging_service.domain.entities.message import Message
from messaging_service.domain.entities.participant import Participant
from messaging_service.infrastructure.db.mappers import conversation as mapper
from messaging_service.infrastructure.db.models.conversation import ConversationModel
from messaging_service.infrastructure.db.models.participant import ParticipantModel
from messaging_service.infrastructure.db.repositories._errors import translate_db_errors


def _select_conversations():
    # Counters are changed with bulk UPDATEs, so rows already in the identity
    # map must be refreshed on every read.
    return select(ConversationModel).execution_options(populate_existing=True)


async def _load(session: AsyncSession, conversation_id: UUID) -> Conversation | None:
    stmt = _select_conversations().where(ConversationModel.id == conversation_id)
    result = await session.execute(stmt)
    model = result.scalar_one_or_none()
    return mapper.model_to_entity(model) if model else None


class ConversationReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_db_errors
    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        return await _load(self._session, conversation_id)

    @translate_db_errors
    async def find_direct_between(self, user_a: int, user_b: int) -> Conversation | None:
        stmt = _select_conversations().where(
            ConversationModel.direct_key == direct_key(user_a, user_b),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    @translate_db_errors
    async def list_for_participant(self, user_id: int) -> list[Conversation]:
        member_of = select(ParticipantModel.conversation_id).where(
            ParticipantModel.user_id == user_id,
        )
        stmt = (
            _select_conversations()
            .where(ConversationModel.id.in_(member_of))
            .order_by(
                ConversationModel.last_message_at.desc(),
                ConversationModel.updated_at.desc(),
                ConversationModel.id,
            )
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class ConversationWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_db_errors
    async def create(self, conversation: Conversation) -> Conversation:
        model = mapper.entity_to_model(conversation)
        values = {
            "id": model.id,
            "type": model.type,
            "direct_key": model.direct_key,
            "group_name": model.group_name,
            "group_created_by": model.group_created_by,
            "last_message_at": model.last_message_at,
            "created_at": model.created_at,
            "updated_at": model.updated_at,
        }
        stmt = (
            pg_insert(ConversationModel)
            .values(**values)
            .on_conflict_do_nothing(constraint="uq_conversations_direct_key")
            .returning(ConversationModel.id)
        )
        result = await self._session.execute(stmt)
        if result.scalar_one_or_none() is None:
            raise ConflictError("Direct conversation already exists for this pair")

        await self._session.execute(
            pg_insert(ParticipantModel).values(
                mapper.participant_rows(conversation.id, conversation.participants)
            )
        )
        await self._session.flush()
        return conversation

    @translate_db_errors
    async def apply_message(self, conversation_id: UUID, message: Message) -> None:
        await self._session.execute(
            update(ConversationModel)
            .where(
                ConversationModel.id == conversation_id,
                # A send that commits after a newer one must not roll the summary back.
                or_(
                    ConversationModel.last_message_id.is_(None),
                    ConversationModel.last_message_at <= message.created_at,
                ),
            )
            .values(
                last_message_id=message.id,
                last_message_content=message.content,
                last_message_sender_id=message.sender_id,
                last_message_at=message.created_at,
                updated_at=message.created_at,
            )
            .execution_options(synchronize_session=False)
        )
        # In-place increments: concurrent senders never overwrite each other's counts.
        await self._session.execute(
            update(ParticipantModel)
            .where(ParticipantModel.conversation_id == conversation_id)
            .values(
                unread_count=case(
                    (ParticipantModel.user_id == message.sender_id, 0),
                    else_=ParticipantModel.unread_count + 1,
                ),
                seen_at=None,
            )
            .execution_options(synchronize_session=False)
        )

    @translate_db_errors
    async def mark_seen(
        self,
        conversation_id: UUID,
        user_id: int,
        ts: datetime,
    ) -> Conversation:
        result = await self._session.execute(
            update(ParticipantModel)
            .where(
                ParticipantModel.conversation_id == conversation_id,
                ParticipantModel.user_id == user_id,
            )
            .values(
                unread_count=0,
                seen_at=func.coalesce(ParticipantModel.seen_at, ts),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("Participant not found")
        conversation = await _load(self._session, conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation not found")
        return conversation

    @translate_db_errors
    async def add_participants(
        self,
        conversation_id: UUID,
        participants: list[Participant],
    ) -> None:
        if not participants:
            return
        stmt = (
            pg_insert(ParticipantModel)
            .values(mapper.participant_rows(conversation_id, participants))
            .on_conflict_do_nothing(constraint="uq_participant_member")
        )
        await self._session.execute(stmt)
