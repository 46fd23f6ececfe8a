"""Process-local chat state.

Two flat lists scanned linearly. State is not shared between processes, so
running more than one server process splits conversations between them.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from apex_chat.domain.entities.conversation import Conversation
from apex_chat.domain.entities.message import Message


@dataclass
class InMemoryChatStore:
    conversations: list[Conversation] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)

    def clear(self) -> None:
        self.conversations.clear()
        self.messages.clear()
