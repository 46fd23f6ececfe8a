"""Process-wide wiring: one store, one Socket.IO server, one gateway."""
from __future__ import annotations

from dataclasses import dataclass

import socketio

from apex_chat.application.ports.auth import TokenVerifier
from apex_chat.application.ports.clock import Clock, SystemClock
from apex_chat.config import settings
from apex_chat.infrastructure.auth.hs256_verifier import HS256Verifier
from apex_chat.infrastructure.memory.store import InMemoryChatStore
from apex_chat.infrastructure.memory.uow import InMemoryUoW
from apex_chat.realtime.gateway import ChatGateway
from apex_chat.realtime.server import create_socket_server


@dataclass
class ChatContainer:
    store: InMemoryChatStore
    sio: socketio.AsyncServer
    verifier: TokenVerifier
    gateway: ChatGateway
    clock: Clock

    def uow(self) -> InMemoryUoW:
        return InMemoryUoW(self.store)


def build_container(
    *,
    store: InMemoryChatStore | None = None,
    verifier: TokenVerifier | None = None,
    clock: Clock | None = None,
) -> ChatContainer:
    store = store or InMemoryChatStore()
    verifier = verifier or HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)
    clock = clock or SystemClock()
    sio = create_socket_server()
    gateway = ChatGateway(
        sio,
        lambda: InMemoryUoW(store),
        verifier,
        clock=clock,
    )
    gateway.register()
    return ChatContainer(store=store, sio=sio, verifier=verifier, gateway=gateway, clock=clock)
