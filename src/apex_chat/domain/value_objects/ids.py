from __future__ import annotations

import uuid
from typing import NewType

ConversationId = NewType("ConversationId", str)
MessageId = NewType("MessageId", str)
UserId = NewType("UserId", str)

SYSTEM_SENDER_ID = UserId("system")
BROADCAST_RECEIVER_ID = UserId("all")


def new_conversation_id() -> ConversationId:
    return ConversationId(f"conv_{uuid.uuid4()}")


def new_message_id() -> MessageId:
    return MessageId(f"msg_{uuid.uuid4()}")
