from __future__ import annotations

from datetime import datetime
from typing import Protocol

from apex_chat.domain.entities.conversation import Conversation


class ConversationReader(Protocol):
    async def get_by_id(self, conversation_id: str) -> Conversation | None: ...

    async def find_by_participants(self, first: str, second: str) -> Conversation | None:
        """Find the conversation whose participants include both users."""
        ...

    async def list_for_user(self, user_id: str) -> list[Conversation]: ...


class ConversationWriter(Protocol):
    async def create(self, conversation: Conversation) -> Conversation: ...

    async def touch_last_message(
        self, conversation_id: str, text: str, ts: datetime
    ) -> None: ...
