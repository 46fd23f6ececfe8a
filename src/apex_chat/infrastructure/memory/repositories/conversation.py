from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from apex_chat.domain.entities.conversation import Conversation
from apex_chat.infrastructure.memory.store import InMemoryChatStore


class InMemoryConversationReader:
    def __init__(self, store: InMemoryChatStore) -> None:
        self._store = store

    async def get_by_id(self, conversation_id: str) -> Conversation | None:
        for conversation in self._store.conversations:
            if conversation.id == conversation_id:
                return conversation
        return None

    async def find_by_participants(self, first: str, second: str) -> Conversation | None:
        for conversation in self._store.conversations:
            if conversation.is_between(first, second):
                return conversation
        return None

    async def list_for_user(self, user_id: str) -> list[Conversation]:
        return [c for c in self._store.conversations if c.has_participant(user_id)]


class InMemoryConversationWriter:
    def __init__(self, store: InMemoryChatStore) -> None:
        self._store = store

    async def create(self, conversation: Conversation) -> Conversation:
        self._store.conversations.append(conversation)
        return conversation

    async def touch_last_message(
        self,
        conversation_id: str,
        text: str,
        ts: datetime,
    ) -> None:
        for idx, conversation in enumerate(self._store.conversations):
            if conversation.id == conversation_id:
                self._store.conversations[idx] = replace(
                    conversation,
                    last_message=text,
                    last_message_at=ts,
                    updated_at=ts,
                )
                return
