from __future__ import annotations

from typing import Protocol

from messaging_service.application.ports.identity import FriendshipReader
from messaging_service.application.repositories.conversation import (
    ConversationReader,
    ConversationWriter,
)
from messaging_service.application.repositories.message import MessageReader, MessageWriter


class UnitOfWork(Protocol):
    conversations: ConversationReader
    conversations_w: ConversationWriter
    messages: MessageReader
    messages_w: MessageWriter
    friendships: FriendshipReader

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...
