from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from apex_chat.application.dto.conversation import ConversationSummary
from apex_chat.application.dto.principal import Principal
from apex_chat.application.exceptions import ValidationError
from apex_chat.application.policies.permissions import assert_conversation_access
from apex_chat.application.ports.clock import Clock, SystemClock
from apex_chat.application.uow import UnitOfWork
from apex_chat.domain.entities.conversation import Conversation
from apex_chat.domain.value_objects.ids import new_conversation_id

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


async def get_or_create_direct_conversation(
    principal: Principal,
    participant_id: str,
    metadata: dict[str, Any] | None,
    uow: UnitOfWork,
    clock: Clock | None = None,
) -> tuple[Conversation, bool]:
    """Return the existing conversation between the two users or create one.

    Returns (conversation, created) where created=True if a new conversation was made.
    """
    participant_id = (participant_id or "").strip()
    if not participant_id:
        raise ValidationError("participantId is required")
    if participant_id == principal.user_id:
        raise ValidationError("Cannot start a conversation with yourself")

    existing = await uow.conversations.find_by_participants(principal.user_id, participant_id)
    if existing is not None:
        return existing, False

    now = (clock or SystemClock()).now()
    conversation = Conversation(
        id=new_conversation_id(),
        participants=(principal.user_id, participant_id),
        created_at=now,
        updated_at=now,
        metadata=dict(metadata or {}),
    )
    conversation = await uow.conversations_w.create(conversation)
    await uow.commit()
    return conversation, True


def _recency_key(conversation: Conversation) -> tuple[bool, datetime, datetime]:
    return (
        conversation.last_message_at is not None,
        conversation.last_message_at or _EPOCH,
        conversation.created_at,
    )


async def list_user_conversations(
    principal: Principal,
    uow: UnitOfWork,
) -> list[ConversationSummary]:
    """Conversations of the caller, most recent activity first, never-messaged ones last."""
    conversations = await uow.conversations.list_for_user(principal.user_id)
    conversations.sort(key=_recency_key, reverse=True)
    return [
        ConversationSummary(
            conversation=c,
            unread_count=await uow.messages.count_unread(c.id, principal.user_id),
        )
        for c in conversations
    ]


async def list_user_conversation_ids(user_id: str, uow: UnitOfWork) -> list[str]:
    return [c.id for c in await uow.conversations.list_for_user(user_id)]


async def get_conversation(
    conversation_id: str,
    principal: Principal,
    uow: UnitOfWork,
) -> Conversation:
    conversation = await uow.conversations.get_by_id(conversation_id)
    return assert_conversation_access(principal, conversation)
