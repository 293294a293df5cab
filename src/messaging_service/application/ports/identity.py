from __future__ import annotations

from typing import Protocol


class FriendshipReader(Protocol):
    async def are_friends(self, user_a: int, user_b: int) -> bool:
        """Symmetric: argument order must not matter."""
        ...
