"""Inbound Socket.IO event payloads (client -> server)."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from apex_chat.config import settings
from apex_chat.domain.value_objects.enums import MessageType


class _Inbound(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ConversationRef(_Inbound):
    """join_conversation | leave_conversation | typing_start | typing_stop"""

    conversation_id: str = Field(min_length=1)


class SendMessagePayload(ConversationRef):
    content: str | None = None
    type: MessageType = MessageType.TEXT


class MarkMessagesReadPayload(ConversationRef):
    message_ids: list[str] = Field(default_factory=list)


class GetMessagesPayload(ConversationRef):
    page: int = Field(1, ge=1)
    limit: int = Field(settings.MESSAGES_PAGE_SIZE, ge=1, le=settings.MESSAGES_PAGE_MAX)


class CreateConversationPayload(_Inbound):
    model_config = ConfigDict(str_strip_whitespace=True)

    participant_id: str = Field(min_length=1)
    metadata: dict[str, Any] | None = None


class UpdateStatusPayload(_Inbound):
    status: str = Field(min_length=1, max_length=32)
