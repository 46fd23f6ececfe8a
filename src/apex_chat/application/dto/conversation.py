from __future__ import annotations

from dataclasses import dataclass

from apex_chat.domain.entities.conversation import Conversation


@dataclass(frozen=True, slots=True)
class ConversationSummary:
    conversation: Conversation
    unread_count: int = 0
