"""Shared test fixtures."""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import jwt
import pytest

from apex_chat.application.dto.principal import Principal
from apex_chat.config import settings
from apex_chat.domain.entities.conversation import Conversation
from apex_chat.domain.entities.message import Message
from apex_chat.domain.value_objects.enums import MessageType, UserRole
from apex_chat.infrastructure.auth.hs256_verifier import HS256Verifier
from apex_chat.infrastructure.memory.store import InMemoryChatStore
from apex_chat.infrastructure.memory.uow import InMemoryUoW
from apex_chat.realtime.gateway import ChatGateway

T0 = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)


class TickingClock:
    """Deterministic clock: every call to now() is one second after the previous one."""

    def __init__(self, start: datetime = T0) -> None:
        self._current = start

    def now(self) -> datetime:
        self._current += timedelta(seconds=1)
        return self._current


def make_token(
    user_id: str = "u1",
    role: str = "candidate",
    *,
    email: str | None = None,
    expires_in: int = 3600,
    secret: str | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    return jwt.encode(
        {
            "userId": user_id,
            "role": role,
            "email": email or f"{user_id}@example.com",
            "iat": now,
            "exp": now + timedelta(seconds=expires_in),
        },
        secret or settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def make_conversation(
    first: str = "u1",
    second: str = "u2",
    *,
    conversation_id: str = "conv_X",
    last_message_at: datetime | None = None,
    created_at: datetime = T0,
) -> Conversation:
    return Conversation(
        id=conversation_id,
        participants=(first, second),
        created_at=created_at,
        updated_at=created_at,
        last_message="hi" if last_message_at else None,
        last_message_at=last_message_at,
    )


def make_message(
    *,
    message_id: str = "msg_1",
    conversation_id: str = "conv_X",
    sender_id: str = "u1",
    receiver_id: str = "u2",
    content: str = "hello",
    created_at: datetime = T0,
    read_at: datetime | None = None,
) -> Message:
    return Message(
        id=message_id,
        conversation_id=conversation_id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        type=MessageType.TEXT.value,
        created_at=created_at,
        updated_at=created_at,
        read_at=read_at,
    )


@pytest.fixture
def alice() -> Principal:
    return Principal(user_id="u1", role=UserRole.CANDIDATE, email="u1@example.com")


@pytest.fixture
def bob() -> Principal:
    return Principal(user_id="u2", role=UserRole.COMPANY, email="u2@example.com")


@pytest.fixture
def mallory() -> Principal:
    return Principal(user_id="u3", role=UserRole.CANDIDATE)


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def store() -> InMemoryChatStore:
    return InMemoryChatStore()


@pytest.fixture
def uow(store: InMemoryChatStore) -> InMemoryUoW:
    return InMemoryUoW(store)


@pytest.fixture
def store_with_conversation(store: InMemoryChatStore) -> InMemoryChatStore:
    store.conversations.append(make_conversation())
    return store


@dataclass
class Emitted:
    event: str
    data: Any
    target: str | None
    recipients: set[str] = field(default_factory=set)


class FakeSocketServer:
    """Stands in for socketio.AsyncServer: records emits and resolves rooms at emit time."""

    def __init__(self) -> None:
        self.handlers: dict[str, Callable[..., Any]] = {}
        self.rooms: dict[str, set[str]] = defaultdict(set)
        self.emitted: list[Emitted] = []

    def on(self, event: str, handler: Callable[..., Any] | None = None, namespace: str | None = None) -> Any:
        self.handlers[event] = handler
        return handler

    async def emit(
        self,
        event: str,
        data: Any = None,
        to: str | None = None,
        room: str | None = None,
        skip_sid: str | list[str] | None = None,
        namespace: str | None = None,
    ) -> None:
        target = to or room
        if target in self.rooms:
            recipients = set(self.rooms[target])
        else:
            recipients = {target} if target else set()
        if isinstance(skip_sid, str):
            skip_sid = [skip_sid]
        recipients -= set(skip_sid or ())
        self.emitted.append(Emitted(event, data, target, recipients))

    async def enter_room(self, sid: str, room: str, namespace: str | None = None) -> None:
        self.rooms[room].add(sid)

    async def leave_room(self, sid: str, room: str, namespace: str | None = None) -> None:
        self.rooms[room].discard(sid)

    def drop(self, sid: str) -> None:
        """What the transport does after the disconnect handler ran."""
        for members in self.rooms.values():
            members.discard(sid)

    def received(self, sid: str, event: str | None = None) -> list[Any]:
        return [
            e.data
            for e in self.emitted
            if sid in e.recipients and (event is None or e.event == event)
        ]

    def count(self, event: str) -> int:
        return sum(1 for e in self.emitted if e.event == event)


@pytest.fixture
def sio() -> FakeSocketServer:
    return FakeSocketServer()


@pytest.fixture
def gateway(sio: FakeSocketServer, store: InMemoryChatStore, clock: TickingClock) -> ChatGateway:
    gw = ChatGateway(
        sio,
        lambda: InMemoryUoW(store),
        HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM),
        clock=clock,
    )
    gw.register()
    return gw


async def connect(gateway: ChatGateway, sid: str, user_id: str, role: str = "candidate") -> None:
    await gateway.on_connect(sid, {}, {"token": make_token(user_id, role)})
