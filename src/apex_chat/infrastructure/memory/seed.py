"""Demo conversation used by the marketing site's chat preview."""
from __future__ import annotations

import logging

from apex_chat.application.ports.clock import Clock, SystemClock
from apex_chat.domain.entities.conversation import Conversation
from apex_chat.domain.entities.message import Message
from apex_chat.domain.value_objects.enums import MessageType
from apex_chat.infrastructure.memory.store import InMemoryChatStore

logger = logging.getLogger(__name__)

DEMO_CONVERSATION_ID = "conv_1"


def seed_demo_data(store: InMemoryChatStore, clock: Clock | None = None) -> None:
    if any(c.id == DEMO_CONVERSATION_ID for c in store.conversations):
        return

    now = (clock or SystemClock()).now()
    text = "Thank you for considering my application."
    store.conversations.append(
        Conversation(
            id=DEMO_CONVERSATION_ID,
            participants=("student1", "company1"),
            created_at=now,
            updated_at=now,
            last_message=text,
            last_message_at=now,
            metadata={
                "applicationId": "app_1",
                "jobTitle": "Software Developer Apprentice",
            },
        )
    )
    store.messages.append(
        Message(
            id="msg_1",
            conversation_id=DEMO_CONVERSATION_ID,
            sender_id="student1",
            receiver_id="company1",
            content=text,
            type=MessageType.TEXT.value,
            created_at=now,
            updated_at=now,
        )
    )
    logger.info("Seeded demo conversation %s", DEMO_CONVERSATION_ID)
