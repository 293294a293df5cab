from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from messaging_service.domain.entities.message import Message
from messaging_service.infrastructure.db.mappers import message as mapper
from messaging_service.infrastructure.db.models.message import MessageModel
from messaging_service.infrastructure.db.repositories._errors import translate_db_errors


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_db_errors
    async def list_before(
        self,
        conversation_id: UUID,
        *,
        before: datetime | None = None,
        before_id: UUID | None = None,
        limit: int = 50,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(MessageModel.conversation_id == conversation_id)
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .limit(limit)
        )
        if before is not None and before_id is not None:
            stmt = stmt.where(
                (MessageModel.created_at < before)
                | ((MessageModel.created_at == before) & (MessageModel.id <= before_id))
            )
        elif before is not None:
            stmt = stmt.where(MessageModel.created_at <= before)
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_db_errors
    async def append(self, message: Message) -> Message:
        self._session.add(mapper.entity_to_model(message))
        await self._session.flush()
        return message
