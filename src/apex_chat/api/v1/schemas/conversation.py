from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from apex_chat.api.v1.schemas.common import WireModel
from apex_chat.application.dto.conversation import ConversationSummary


class ConversationResponse(WireModel):
    id: str = Field(alias="_id")
    participants: list[str]
    last_message: str | None
    last_message_at: datetime | None
    is_active: bool
    metadata: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class ConversationSummaryResponse(ConversationResponse):
    unread_count: int = 0

    @classmethod
    def from_summary(cls, summary: ConversationSummary) -> ConversationSummaryResponse:
        base = ConversationResponse.model_validate(summary.conversation)
        return cls(**base.model_dump(), unread_count=summary.unread_count)
