"""Seed development data: friendships, a direct chat and a group chat."""
from __future__ import annotations

import asyncio
import logging

from sqlalchemy.dialects.postgresql import insert as pg_insert

from messaging_service.application.dto.conversation import CreateConversationDTO
from messaging_service.domain.value_objects.enums import ConversationType
from messaging_service.infrastructure.db.models.friendship import FriendshipModel
from messaging_service.infrastructure.db.session import AsyncSessionLocal, dispose_engine
from messaging_service.infrastructure.db.uow import SqlAlchemyUoW
from messaging_service.logging_config import configure_logging
from messaging_service.services import conversation_service, message_service

logger = logging.getLogger(__name__)

ALICE, BOB, CAROL = 1, 2, 3


async def seed() -> None:
    async with AsyncSessionLocal() as session:
        await session.execute(
            pg_insert(FriendshipModel)
            .values([{"user_a": ALICE, "user_b": BOB}, {"user_a": ALICE, "user_b": CAROL}])
            .on_conflict_do_nothing()
        )
        await session.commit()

        uow = SqlAlchemyUoW(session)
        direct = await message_service.send_direct_message(
            ALICE, BOB, "Hi Bob, are we still on for tomorrow?", None, uow,
        )
        await message_service.send_direct_message(
            BOB, ALICE, "Yes, 10am works.", direct.conversation_id, uow,
        )

        group = await conversation_service.create_conversation(
            ALICE,
            CreateConversationDTO(
                type=ConversationType.GROUP,
                member_ids=[BOB, CAROL],
                group_name="Weekend hike",
            ),
            uow,
        )
        for sender, text in [
            (ALICE, "Trail starts at the north lot."),
            (CAROL, "I'll bring snacks."),
        ]:
            await message_service.send_group_message(sender, group.id, text, uow)

        logger.info("Seeded direct %s and group %s", direct.conversation_id, group.id)
    await dispose_engine()


def main() -> None:
    configure_logging("INFO")
    asyncio.run(seed())


if __name__ == "__main__":
    main()
