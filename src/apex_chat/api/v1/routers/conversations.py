from __future__ import annotations

from fastapi import APIRouter, Query

from apex_chat.api.deps import CurrentPrincipal, UoWDep
from apex_chat.api.v1.schemas.conversation import ConversationSummaryResponse
from apex_chat.api.v1.schemas.message import MessagePageResponse
from apex_chat.config import settings
from apex_chat.services import conversation_service, message_service

router = APIRouter(prefix="/api/v1/chat/conversations", tags=["conversations"])


@router.get("", response_model=list[ConversationSummaryResponse])
async def list_conversations(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> list[ConversationSummaryResponse]:
    summaries = await conversation_service.list_user_conversations(principal, uow)
    return [ConversationSummaryResponse.from_summary(s) for s in summaries]


@router.get("/{conversation_id}/messages", response_model=MessagePageResponse)
async def list_messages(
    conversation_id: str,
    principal: CurrentPrincipal,
    uow: UoWDep,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.MESSAGES_PAGE_SIZE, ge=1, le=settings.MESSAGES_PAGE_MAX),
) -> MessagePageResponse:
    result = await message_service.list_messages(conversation_id, principal, page, limit, uow)
    return MessagePageResponse.from_page(result)
