from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from apex_chat.domain.entities.message import Message
from apex_chat.infrastructure.memory.store import InMemoryChatStore


class InMemoryMessageReader:
    def __init__(self, store: InMemoryChatStore) -> None:
        self._store = store

    async def get_by_id(self, message_id: str) -> Message | None:
        for message in self._store.messages:
            if message.id == message_id:
                return message
        return None

    async def list_page(
        self,
        conversation_id: str,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> list[Message]:
        matching = [m for m in self._store.messages if m.conversation_id == conversation_id]
        # stable sort over reversed append order keeps same-timestamp ties newest first
        newest_first = sorted(reversed(matching), key=lambda m: m.created_at, reverse=True)
        return newest_first[offset:offset + limit]

    async def count_for_conversation(self, conversation_id: str) -> int:
        return sum(1 for m in self._store.messages if m.conversation_id == conversation_id)

    async def count_unread(self, conversation_id: str, receiver_id: str) -> int:
        return sum(
            1
            for m in self._store.messages
            if m.conversation_id == conversation_id
            and m.receiver_id == receiver_id
            and m.read_at is None
        )


class InMemoryMessageWriter:
    def __init__(self, store: InMemoryChatStore) -> None:
        self._store = store

    async def append(self, message: Message) -> Message:
        self._store.messages.append(message)
        return message

    async def mark_read(self, message_id: str, ts: datetime) -> Message | None:
        for idx, message in enumerate(self._store.messages):
            if message.id != message_id:
                continue
            if message.read_at is not None:
                return None
            updated = replace(message, read_at=ts, updated_at=ts)
            self._store.messages[idx] = updated
            return updated
        return None
