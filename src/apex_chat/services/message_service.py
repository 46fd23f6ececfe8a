from __future__ import annotations

from apex_chat.application.dto.message import MessagePage
from apex_chat.application.dto.principal import Principal
from apex_chat.application.exceptions import NotFoundError, ValidationError
from apex_chat.application.policies.permissions import assert_conversation_access
from apex_chat.application.ports.clock import Clock, SystemClock
from apex_chat.application.uow import UnitOfWork
from apex_chat.config import settings
from apex_chat.domain.entities.message import Message
from apex_chat.domain.value_objects.enums import MessageType
from apex_chat.domain.value_objects.ids import (
    BROADCAST_RECEIVER_ID,
    SYSTEM_SENDER_ID,
    new_message_id,
)


def _validate_content(content: str | None) -> str:
    if content is None or not content.strip():
        raise ValidationError("Message content is required")
    if len(content) > settings.MESSAGE_MAX_LENGTH:
        raise ValidationError(
            f"Message content exceeds {settings.MESSAGE_MAX_LENGTH} characters"
        )
    return content


async def send_message(
    conversation_id: str,
    principal: Principal,
    content: str | None,
    msg_type: MessageType,
    uow: UnitOfWork,
    clock: Clock | None = None,
) -> Message:
    """Store a message from a participant and refresh the conversation's last-message cache.

    The receiver is always the participant that isn't the sender.
    """
    conversation = await uow.conversations.get_by_id(conversation_id)
    conversation = assert_conversation_access(principal, conversation)
    content = _validate_content(content)
    receiver_id = conversation.other_participant(principal.user_id)
    if receiver_id is None:
        raise ValidationError("Conversation has no other participant")

    now = (clock or SystemClock()).now()
    msg = Message(
        id=new_message_id(),
        conversation_id=conversation.id,
        sender_id=principal.user_id,
        receiver_id=receiver_id,
        content=content,
        type=msg_type.value,
        created_at=now,
        updated_at=now,
    )
    msg = await uow.messages_w.append(msg)
    await uow.conversations_w.touch_last_message(conversation.id, content, now)
    await uow.commit()
    return msg


async def post_system_message(
    conversation_id: str,
    content: str,
    uow: UnitOfWork,
    clock: Clock | None = None,
) -> Message:
    """Store a system notice in a conversation. System notices are born read."""
    conversation = await uow.conversations.get_by_id(conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    content = _validate_content(content)

    now = (clock or SystemClock()).now()
    msg = Message(
        id=new_message_id(),
        conversation_id=conversation.id,
        sender_id=SYSTEM_SENDER_ID,
        receiver_id=BROADCAST_RECEIVER_ID,
        content=content,
        type=MessageType.SYSTEM.value,
        created_at=now,
        updated_at=now,
        read_at=now,
    )
    msg = await uow.messages_w.append(msg)
    await uow.conversations_w.touch_last_message(conversation.id, content, now)
    await uow.commit()
    return msg


async def list_messages(
    conversation_id: str,
    principal: Principal,
    page: int,
    limit: int,
    uow: UnitOfWork,
) -> MessagePage:
    """Page through history newest-first; each page is returned oldest-first."""
    if page < 1:
        raise ValidationError("page must be >= 1")
    if limit < 1:
        raise ValidationError("limit must be >= 1")

    conversation = await uow.conversations.get_by_id(conversation_id)
    assert_conversation_access(principal, conversation)

    newest_first = await uow.messages.list_page(
        conversation_id, offset=(page - 1) * limit, limit=limit,
    )
    total = await uow.messages.count_for_conversation(conversation_id)
    return MessagePage(
        conversation_id=conversation_id,
        messages=list(reversed(newest_first)),
        page=page,
        limit=limit,
        total=total,
    )
