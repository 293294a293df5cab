from __future__ import annotations

from dataclasses import dataclass, field

from messaging_service.domain.value_objects.enums import ConversationType


@dataclass(frozen=True, slots=True)
class CreateConversationDTO:
    type: ConversationType | str | None
    member_ids: list[int] = field(default_factory=list)
    group_name: str | None = None


@dataclass(frozen=True, slots=True)
class SeenStateDTO:
    seen_by: list[int]
    my_unread_count: int
