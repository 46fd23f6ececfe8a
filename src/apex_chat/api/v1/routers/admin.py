from __future__ import annotations

import logging

from fastapi import APIRouter, status

from apex_chat.api.deps import CurrentAdmin, GatewayDep
from apex_chat.api.v1.schemas.message import MessageResponse, SystemMessageRequest
from apex_chat.api.v1.schemas.notification import NotificationRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/chat/admin", tags=["admin"])


@router.post("/notifications", status_code=status.HTTP_202_ACCEPTED)
async def push_notification(
    body: NotificationRequest,
    admin: CurrentAdmin,
    gateway: GatewayDep,
) -> dict[str, object]:
    online = await gateway.send_notification(body.user_id, body.payload())
    logger.info("Admin %s notified user %s (online=%s)", admin.user_id, body.user_id, online)
    return {"userId": body.user_id, "online": online}


@router.post(
    "/conversations/{conversation_id}/system-messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_system_message(
    conversation_id: str,
    body: SystemMessageRequest,
    admin: CurrentAdmin,
    gateway: GatewayDep,
) -> MessageResponse:
    msg = await gateway.send_system_message(conversation_id, body.content)
    return MessageResponse.model_validate(msg)
