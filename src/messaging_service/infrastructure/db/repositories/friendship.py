from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from messaging_service.infrastructure.db.models.friendship import FriendshipModel
from messaging_service.infrastructure.db.repositories._errors import translate_db_errors


class FriendshipReaderRepo:
    """Implements application.ports.identity.FriendshipReader."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_db_errors
    async def are_friends(self, user_a: int, user_b: int) -> bool:
        low, high = sorted((user_a, user_b))
        stmt = (
            select(FriendshipModel.user_a)
            .where(FriendshipModel.user_a == low, FriendshipModel.user_b == high)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None
