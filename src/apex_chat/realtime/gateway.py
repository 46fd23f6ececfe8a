"""Socket.IO event handlers for conversations, messages, receipts, typing and presence."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from pydantic import ValidationError as PayloadError
from socketio.exceptions import ConnectionRefusedError

from apex_chat.api.v1.schemas.conversation import (
    ConversationResponse,
    ConversationSummaryResponse,
)
from apex_chat.api.v1.schemas.events import (
    MessageReadEvent,
    MessagesMarkedReadEvent,
    SenderInfo,
    UserStatusChangedEvent,
)
from apex_chat.api.v1.schemas.message import MessagePageResponse, MessageResponse
from apex_chat.application.dto.principal import Principal
from apex_chat.application.exceptions import (
    AppError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
)
from apex_chat.application.ports.auth import TokenVerifier
from apex_chat.application.ports.clock import Clock, SystemClock
from apex_chat.application.ports.realtime import RealtimeServer
from apex_chat.application.uow import UoWFactory
from apex_chat.domain.entities.message import Message
from apex_chat.domain.value_objects.enums import PresenceStatus
from apex_chat.infrastructure.realtime.locks import KeyedLock
from apex_chat.infrastructure.realtime.manager import (
    ConnectionManager,
    room_for_conversation,
    room_for_user,
)
from apex_chat.infrastructure.realtime.protocol import (
    ConversationRef,
    CreateConversationPayload,
    GetMessagesPayload,
    MarkMessagesReadPayload,
    SendMessagePayload,
    UpdateStatusPayload,
)
from apex_chat.realtime.server import extract_token
from apex_chat.services import (
    conversation_service,
    message_service,
    read_state_service,
)

logger = logging.getLogger(__name__)

NO_ACCESS = "Conversation not found or access denied"


class ChatGateway:
    """Binds chat events to a Socket.IO server.

    Built once per process. Room membership is mirrored in ``connections`` so the
    relay can tell whether a receiver is currently viewing a conversation.
    """

    def __init__(
        self,
        sio: RealtimeServer,
        uow_factory: UoWFactory,
        verifier: TokenVerifier,
        *,
        connections: ConnectionManager | None = None,
        locks: KeyedLock | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._sio = sio
        self._uow_factory = uow_factory
        self._verifier = verifier
        self.connections = connections or ConnectionManager()
        self._locks = locks or KeyedLock()
        self._clock = clock or SystemClock()

    def register(self) -> None:
        handlers = {
            "connect": self.on_connect,
            "disconnect": self.on_disconnect,
            "join_conversation": self.on_join_conversation,
            "leave_conversation": self.on_leave_conversation,
            "send_message": self.on_send_message,
            "mark_messages_read": self.on_mark_messages_read,
            "typing_start": self.on_typing_start,
            "typing_stop": self.on_typing_stop,
            "get_messages": self.on_get_messages,
            "create_conversation": self.on_create_conversation,
            "get_conversations": self.on_get_conversations,
            "update_status": self.on_update_status,
        }
        for event, handler in handlers.items():
            self._sio.on(event, handler)

    # -- connection lifecycle ------------------------------------------------

    async def on_connect(self, sid: str, environ: dict[str, Any], auth: Any | None = None) -> None:
        token = extract_token(environ, auth)
        if not token:
            logger.info("Socket %s refused: no token", sid)
            raise ConnectionRefusedError("Authentication error: No token provided")

        try:
            principal = await self._verifier.verify(token)
        except AuthenticationError as exc:
            logger.info("Socket %s refused: %s", sid, exc.detail)
            raise ConnectionRefusedError("Authentication error: Invalid token") from exc

        self.connections.connect(sid, principal)
        await self._sio.enter_room(sid, room_for_user(principal.user_id))

        conversation_ids = await conversation_service.list_user_conversation_ids(
            principal.user_id, self._uow_factory(),
        )
        for conversation_id in conversation_ids:
            await self._join(sid, conversation_id)
        logger.info(
            "User %s (%s) connected sid=%s conversations=%d",
            principal.user_id, principal.role.value, sid, len(conversation_ids),
        )

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        principal = self.connections.disconnect(sid)
        if principal is None:
            return
        logger.info("User %s disconnected sid=%s reason=%s", principal.user_id, sid, reason)
        if self.connections.is_online(principal.user_id):
            return
        try:
            await self._broadcast_status(principal, PresenceStatus.OFFLINE.value, skip_sid=sid)
        except Exception:
            logger.exception("Failed to broadcast offline status for %s", principal.user_id)

    # -- room membership -----------------------------------------------------

    async def on_join_conversation(self, sid: str, data: Any = None) -> None:
        async with self._reporting(sid, "Failed to join conversation"):
            principal = self._principal(sid)
            payload = ConversationRef.model_validate(data or {})
            try:
                conversation = await conversation_service.get_conversation(
                    payload.conversation_id, principal, self._uow_factory(),
                )
            except (NotFoundError, ForbiddenError):
                await self._error(sid, NO_ACCESS)
                return
            await self._join(sid, conversation.id)
            await self._sio.emit("joined_conversation", {"conversationId": conversation.id}, to=sid)

    async def on_leave_conversation(self, sid: str, data: Any = None) -> None:
        async with self._reporting(sid, "Failed to leave conversation"):
            self._principal(sid)
            payload = ConversationRef.model_validate(data or {})
            await self._leave(sid, payload.conversation_id)
            await self._sio.emit("left_conversation", {"conversationId": payload.conversation_id}, to=sid)

    # -- messages ------------------------------------------------------------

    async def on_send_message(self, sid: str, data: Any = None) -> None:
        async with self._reporting(sid, "Failed to send message"):
            principal = self._principal(sid)
            payload = SendMessagePayload.model_validate(data or {})
            async with self._locks.hold(payload.conversation_id):
                msg = await message_service.send_message(
                    payload.conversation_id,
                    principal,
                    payload.content,
                    payload.type,
                    self._uow_factory(),
                    self._clock,
                )
                await self._deliver(msg, sender=principal)
            await self._sio.emit(
                "message_sent",
                {"messageId": msg.id, "conversationId": msg.conversation_id},
                to=sid,
            )

    async def on_get_messages(self, sid: str, data: Any = None) -> None:
        async with self._reporting(sid, "Failed to load messages"):
            principal = self._principal(sid)
            payload = GetMessagesPayload.model_validate(data or {})
            try:
                page = await message_service.list_messages(
                    payload.conversation_id,
                    principal,
                    payload.page,
                    payload.limit,
                    self._uow_factory(),
                )
            except (NotFoundError, ForbiddenError):
                await self._error(sid, NO_ACCESS)
                return
            await self._sio.emit("messages_loaded", MessagePageResponse.from_page(page).to_wire(), to=sid)

    async def on_mark_messages_read(self, sid: str, data: Any = None) -> None:
        async with self._reporting(sid, "Failed to mark messages as read"):
            principal = self._principal(sid)
            payload = MarkMessagesReadPayload.model_validate(data or {})
            result = await read_state_service.mark_messages_read(
                payload.conversation_id,
                principal,
                payload.message_ids,
                self._uow_factory(),
                self._clock,
            )
            for msg in result.updated:
                event = MessageReadEvent(
                    message_id=msg.id,
                    read_at=msg.read_at,
                    conversation_id=msg.conversation_id,
                )
                await self._sio.emit("message_read", event.to_wire(), room=room_for_user(msg.sender_id))
            ack = MessagesMarkedReadEvent(
                conversation_id=result.conversation_id,
                message_ids=result.requested_ids,
                updated_ids=result.updated_ids,
            )
            await self._sio.emit("messages_marked_read", ack.to_wire(), to=sid)

    # -- typing --------------------------------------------------------------

    async def on_typing_start(self, sid: str, data: Any = None) -> None:
        await self._relay_typing(sid, data, "user_typing")

    async def on_typing_stop(self, sid: str, data: Any = None) -> None:
        await self._relay_typing(sid, data, "user_stopped_typing")

    async def _relay_typing(self, sid: str, data: Any, event: str) -> None:
        async with self._reporting(sid, "Failed to relay typing indicator"):
            principal = self._principal(sid)
            payload = ConversationRef.model_validate(data or {})
            try:
                await conversation_service.get_conversation(
                    payload.conversation_id, principal, self._uow_factory(),
                )
            except (NotFoundError, ForbiddenError):
                await self._error(sid, NO_ACCESS)
                return
            await self._sio.emit(
                event,
                {"userId": principal.user_id, "conversationId": payload.conversation_id},
                room=room_for_conversation(payload.conversation_id),
                skip_sid=sorted(self.connections.sids_for_user(principal.user_id)),
            )

    # -- conversation directory ----------------------------------------------

    async def on_create_conversation(self, sid: str, data: Any = None) -> None:
        async with self._reporting(sid, "Failed to create conversation"):
            principal = self._principal(sid)
            payload = CreateConversationPayload.model_validate(data or {})
            pair_key = "pair:" + "|".join(sorted((principal.user_id, payload.participant_id)))
            async with self._locks.hold(pair_key):
                conversation, created = await conversation_service.get_or_create_direct_conversation(
                    principal,
                    payload.participant_id,
                    payload.metadata,
                    self._uow_factory(),
                    self._clock,
                )
            body = {"conversation": ConversationResponse.model_validate(conversation).to_wire()}
            if not created:
                await self._sio.emit("conversation_exists", body, to=sid)
                return

            await self._join(sid, conversation.id)
            target_id = conversation.other_participant(principal.user_id)
            await self._sio.emit("new_conversation", body, room=room_for_user(target_id))
            await self._sio.emit("conversation_created", body, to=sid)
            logger.info("Conversation %s created by %s", conversation.id, principal.user_id)

    async def on_get_conversations(self, sid: str, data: Any = None) -> None:
        async with self._reporting(sid, "Failed to load conversations"):
            principal = self._principal(sid)
            summaries = await conversation_service.list_user_conversations(principal, self._uow_factory())
            await self._sio.emit(
                "conversations_loaded",
                {"conversations": [ConversationSummaryResponse.from_summary(s).to_wire() for s in summaries]},
                to=sid,
            )

    # -- presence ------------------------------------------------------------

    async def on_update_status(self, sid: str, data: Any = None) -> None:
        async with self._reporting(sid, "Failed to update status"):
            principal = self._principal(sid)
            payload = UpdateStatusPayload.model_validate(data or {})
            await self._broadcast_status(principal, payload.status)

    async def _broadcast_status(self, principal: Principal, status: str, *, skip_sid: str | None = None) -> None:
        skip = self.connections.sids_for_user(principal.user_id)
        if skip_sid:
            skip.add(skip_sid)
        event = UserStatusChangedEvent(user_id=principal.user_id, status=status, timestamp=self._clock.now())
        conversation_ids = await conversation_service.list_user_conversation_ids(
            principal.user_id, self._uow_factory(),
        )
        for conversation_id in conversation_ids:
            await self._sio.emit(
                "user_status_changed",
                event.to_wire(),
                room=room_for_conversation(conversation_id),
                skip_sid=sorted(skip),
            )

    # -- server-side helpers -------------------------------------------------

    async def send_notification(self, user_id: str, payload: dict[str, Any]) -> bool:
        """Push a generic notification to a user's personal room. Returns whether they are online."""
        await self._sio.emit("notification", payload, room=room_for_user(user_id))
        return self.connections.is_online(user_id)

    async def send_system_message(self, conversation_id: str, content: str) -> Message:
        async with self._locks.hold(conversation_id):
            msg = await message_service.post_system_message(
                conversation_id, content, self._uow_factory(), self._clock,
            )
            await self._sio.emit(
                "new_message",
                MessageResponse.model_validate(msg).to_wire(),
                room=room_for_conversation(conversation_id),
            )
        return msg

    # -- internals -----------------------------------------------------------

    async def _deliver(self, msg: Message, *, sender: Principal) -> None:
        wire = MessageResponse.model_validate(msg).to_wire()
        await self._sio.emit("new_message", wire, room=room_for_conversation(msg.conversation_id))

        if self.connections.user_in_conversation(msg.receiver_id, msg.conversation_id):
            return
        notification = {
            "conversationId": msg.conversation_id,
            "message": wire,
            "senderInfo": SenderInfo(user_id=sender.user_id, role=sender.role.value).to_wire(),
        }
        await self._sio.emit("message_notification", notification, room=room_for_user(msg.receiver_id))

    async def _join(self, sid: str, conversation_id: str) -> None:
        await self._sio.enter_room(sid, room_for_conversation(conversation_id))
        self.connections.subscribe(sid, conversation_id)

    async def _leave(self, sid: str, conversation_id: str) -> None:
        await self._sio.leave_room(sid, room_for_conversation(conversation_id))
        self.connections.unsubscribe(sid, conversation_id)

    def _principal(self, sid: str) -> Principal:
        principal = self.connections.principal_for(sid)
        if principal is None:
            raise AuthenticationError("Not authenticated")
        return principal

    async def _error(self, sid: str, message: str) -> None:
        await self._sio.emit("error", {"message": message}, to=sid)

    @asynccontextmanager
    async def _reporting(self, sid: str, failure: str) -> AsyncIterator[None]:
        """Turn any handler failure into an ``error`` event for the caller."""
        try:
            yield
        except PayloadError:
            await self._error(sid, "Invalid payload")
        except AppError as exc:
            await self._error(sid, exc.detail or failure)
        except Exception:
            logger.exception("%s (sid=%s)", failure, sid)
            await self._error(sid, failure)
