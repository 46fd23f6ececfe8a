from __future__ import annotations

from datetime import datetime
from typing import Protocol

from apex_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def get_by_id(self, message_id: str) -> Message | None: ...

    async def list_page(
        self,
        conversation_id: str,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> list[Message]:
        """Return messages newest first."""
        ...

    async def count_for_conversation(self, conversation_id: str) -> int: ...

    async def count_unread(self, conversation_id: str, receiver_id: str) -> int: ...


class MessageWriter(Protocol):
    async def append(self, message: Message) -> Message: ...

    async def mark_read(self, message_id: str, ts: datetime) -> Message | None:
        """Set read_at if it is still unset. Return the updated message, else None."""
        ...
