from __future__ import annotations

from apex_chat.application.dto.message import ReadReceiptResult
from apex_chat.application.dto.principal import Principal
from apex_chat.application.ports.clock import Clock, SystemClock
from apex_chat.application.uow import UnitOfWork
from apex_chat.domain.entities.message import Message


async def mark_messages_read(
    conversation_id: str,
    principal: Principal,
    message_ids: list[str],
    uow: UnitOfWork,
    clock: Clock | None = None,
) -> ReadReceiptResult:
    """Mark the caller's unread messages in a conversation as read.

    Ids that are unknown, belong to another conversation, were not received
    by the caller or are already read are skipped without error.
    """
    now = (clock or SystemClock()).now()
    updated: list[Message] = []
    for message_id in message_ids:
        msg = await uow.messages.get_by_id(message_id)
        if (
            msg is None
            or msg.conversation_id != conversation_id
            or msg.receiver_id != principal.user_id
            or msg.is_read
        ):
            continue
        marked = await uow.messages_w.mark_read(message_id, now)
        if marked is not None:
            updated.append(marked)

    if updated:
        await uow.commit()
    return ReadReceiptResult(
        conversation_id=conversation_id,
        requested_ids=list(message_ids),
        updated=updated,
    )
