"""In-process registry of Socket.IO sessions and conversation-room membership."""
from __future__ import annotations

import logging

from apex_chat.application.dto.principal import Principal

logger = logging.getLogger(__name__)


def room_for_user(user_id: str) -> str:
    return f"user_{user_id}"


def room_for_conversation(conversation_id: str) -> str:
    return f"conversation_{conversation_id}"


class ConnectionManager:
    """Tracks sockets per user and which sockets are subscribed to each conversation.

    Mirrors the rooms the Socket.IO server is told to enter/leave so membership can
    be queried from outside a handler.
    """

    def __init__(self) -> None:
        self._principals: dict[str, Principal] = {}
        self._connections: dict[str, set[str]] = {}
        self._subscriptions: dict[str, set[str]] = {}

    def connect(self, sid: str, principal: Principal) -> None:
        self._principals[sid] = principal
        self._connections.setdefault(principal.user_id, set()).add(sid)
        logger.debug("Socket connected: %s user=%s (users=%d)", sid, principal.user_id, len(self._connections))

    def disconnect(self, sid: str) -> Principal | None:
        """Forget a socket. Returns its principal, or None if the sid was unknown."""
        principal = self._principals.pop(sid, None)
        if principal is None:
            return None
        sids = self._connections.get(principal.user_id)
        if sids:
            sids.discard(sid)
            if not sids:
                del self._connections[principal.user_id]
        for conversation_id in [cid for cid, subs in self._subscriptions.items() if sid in subs]:
            self.unsubscribe(sid, conversation_id)
        logger.debug("Socket disconnected: %s user=%s", sid, principal.user_id)
        return principal

    def principal_for(self, sid: str) -> Principal | None:
        return self._principals.get(sid)

    def is_online(self, user_id: str) -> bool:
        return bool(self._connections.get(user_id))

    def sids_for_user(self, user_id: str) -> set[str]:
        return set(self._connections.get(user_id, ()))

    def subscribe(self, sid: str, conversation_id: str) -> None:
        self._subscriptions.setdefault(conversation_id, set()).add(sid)

    def unsubscribe(self, sid: str, conversation_id: str) -> None:
        subs = self._subscriptions.get(conversation_id)
        if subs:
            subs.discard(sid)
            if not subs:
                del self._subscriptions[conversation_id]

    def is_subscribed(self, sid: str, conversation_id: str) -> bool:
        return sid in self._subscriptions.get(conversation_id, ())

    def subscribers(self, conversation_id: str) -> set[str]:
        return set(self._subscriptions.get(conversation_id, ()))

    def user_in_conversation(self, user_id: str, conversation_id: str) -> bool:
        """True if any of the user's sockets is subscribed to the conversation room."""
        subs = self._subscriptions.get(conversation_id, set())
        return any(sid in subs for sid in self._connections.get(user_id, ()))

    @property
    def connection_count(self) -> int:
        return len(self._principals)
