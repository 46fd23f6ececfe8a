from __future__ import annotations

from dataclasses import dataclass, field

from apex_chat.domain.entities.message import Message


@dataclass(frozen=True, slots=True)
class MessagePage:
    """One page of history, oldest message first."""

    conversation_id: str
    messages: list[Message]
    page: int
    limit: int
    total: int

    @property
    def has_more(self) -> bool:
        return self.total > self.page * self.limit


@dataclass(frozen=True, slots=True)
class ReadReceiptResult:
    conversation_id: str
    requested_ids: list[str]
    updated: list[Message] = field(default_factory=list)

    @property
    def updated_ids(self) -> list[str]:
        return [m.id for m in self.updated]
