from __future__ import annotations

from typing import Any, Callable, Protocol


class RealtimeServer(Protocol):
    """The part of ``socketio.AsyncServer`` the chat gateway relies on."""

    def on(self, event: str, handler: Callable[..., Any] | None = None, namespace: str | None = None) -> Any: ...

    async def emit(
        self,
        event: str,
        data: Any = None,
        to: str | None = None,
        room: str | None = None,
        skip_sid: str | list[str] | None = None,
        namespace: str | None = None,
    ) -> None: ...

    async def enter_room(self, sid: str, room: str, namespace: str | None = None) -> None: ...

    async def leave_room(self, sid: str, room: str, namespace: str | None = None) -> None: ...
