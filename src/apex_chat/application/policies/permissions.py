from __future__ import annotations

from apex_chat.application.dto.principal import Principal
from apex_chat.application.exceptions import ForbiddenError, NotFoundError
from apex_chat.domain.entities.conversation import Conversation


def assert_conversation_access(
    principal: Principal,
    conversation: Conversation | None,
) -> Conversation:
    """Raise if conversation doesn't exist or principal is not one of its two participants."""
    if conversation is None:
        raise NotFoundError("Conversation not found")

    if not conversation.has_participant(principal.user_id):
        raise ForbiddenError("Access denied")

    return conversation


def assert_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise ForbiddenError("Admin access required")
