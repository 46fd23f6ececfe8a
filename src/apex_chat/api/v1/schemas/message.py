from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from apex_chat.api.v1.schemas.common import WireModel
from apex_chat.application.dto.message import MessagePage


class MessageResponse(WireModel):
    id: str = Field(alias="_id")
    conversation_id: str
    sender_id: str
    receiver_id: str
    content: str
    type: str
    read_at: datetime | None
    created_at: datetime
    updated_at: datetime
    metadata: dict[str, Any] | None = None


class PaginationResponse(WireModel):
    current_page: int
    limit: int
    total: int
    has_more: bool


class MessagePageResponse(WireModel):
    conversation_id: str
    messages: list[MessageResponse]
    pagination: PaginationResponse

    @classmethod
    def from_page(cls, page: MessagePage) -> MessagePageResponse:
        return cls(
            conversation_id=page.conversation_id,
            messages=[MessageResponse.model_validate(m) for m in page.messages],
            pagination=PaginationResponse(
                current_page=page.page,
                limit=page.limit,
                total=page.total,
                has_more=page.has_more,
            ),
        )


class SystemMessageRequest(WireModel):
    content: str
