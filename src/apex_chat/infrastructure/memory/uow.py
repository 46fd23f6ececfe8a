from __future__ import annotations

from types import TracebackType
from typing import Self

from apex_chat.infrastructure.memory.repositories.conversation import (
    InMemoryConversationReader,
    InMemoryConversationWriter,
)
from apex_chat.infrastructure.memory.repositories.message import (
    InMemoryMessageReader,
    InMemoryMessageWriter,
)
from apex_chat.infrastructure.memory.store import InMemoryChatStore


class InMemoryUoW:
    """Unit-of-Work over the in-memory store.

    Writes are applied immediately, so commit and rollback have nothing to do.
    """

    def __init__(self, store: InMemoryChatStore) -> None:
        self._store = store
        self.conversations = InMemoryConversationReader(store)
        self.conversations_w = InMemoryConversationWriter(store)
        self.messages = InMemoryMessageReader(store)
        self.messages_w = InMemoryMessageWriter(store)

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()
