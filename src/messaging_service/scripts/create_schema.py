"""One-time script: create all tables for a fresh database."""
from __future__ import annotations

import asyncio
import logging

from messaging_service.infrastructure.db import models  # noqa: F401
from messaging_service.infrastructure.db.base import Base
from messaging_service.infrastructure.db.session import dispose_engine, engine
from messaging_service.logging_config import configure_logging

logger = logging.getLogger(__name__)


async def create_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await dispose_engine()
    logger.info("Created tables: %s", ", ".join(sorted(Base.metadata.tables)))


def main() -> None:
    configure_logging("INFO")
    asyncio.run(create_schema())


if __name__ == "__main__":
    main()
