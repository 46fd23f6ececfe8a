from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class Conversation:
    """Two-party conversation. The participant pair is fixed at creation."""

    id: str
    participants: tuple[str, str]
    created_at: datetime
    updated_at: datetime
    last_message: str | None = None
    last_message_at: datetime | None = None
    is_active: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participants

    def other_participant(self, user_id: str) -> str | None:
        for participant in self.participants:
            if participant != user_id:
                return participant
        return None

    def is_between(self, first: str, second: str) -> bool:
        return self.has_participant(first) and self.has_participant(second)
