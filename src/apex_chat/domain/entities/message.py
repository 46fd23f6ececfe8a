from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class Message:
    id: str
    conversation_id: str
    sender_id: str
    receiver_id: str
    content: str
    type: str
    created_at: datetime
    updated_at: datetime
    read_at: datetime | None = None
    metadata: dict[str, Any] | None = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None
