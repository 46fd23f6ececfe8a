"""Server -> client Socket.IO event bodies that are not plain entities."""
from __future__ import annotations

from datetime import datetime

from apex_chat.api.v1.schemas.common import WireModel


class MessageReadEvent(WireModel):
    message_id: str
    read_at: datetime
    conversation_id: str


class MessagesMarkedReadEvent(WireModel):
    conversation_id: str
    message_ids: list[str]
    updated_ids: list[str]


class UserStatusChangedEvent(WireModel):
    user_id: str
    status: str
    timestamp: datetime


class SenderInfo(WireModel):
    user_id: str
    role: str
