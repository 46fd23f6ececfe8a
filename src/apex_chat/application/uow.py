from __future__ import annotations

from typing import Callable, Protocol

from apex_chat.application.repositories.conversation import (
    ConversationReader,
    ConversationWriter,
)
from apex_chat.application.repositories.message import MessageReader, MessageWriter


class UnitOfWork(Protocol):
    conversations: ConversationReader
    conversations_w: ConversationWriter
    messages: MessageReader
    messages_w: MessageWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...


UoWFactory = Callable[[], UnitOfWork]
