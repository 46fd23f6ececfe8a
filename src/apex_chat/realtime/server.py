"""Socket.IO server instance and handshake helpers.

Frontend convention (socket.io-client):
- path: /socket.io/ (``SOCKETIO_PATH``)
- auth: ``{ token }`` in the handshake; ``?token=`` and an
  ``Authorization: Bearer`` header are accepted as fallbacks.
"""
from __future__ import annotations

from typing import Any
from urllib.parse import parse_qs

import socketio

from apex_chat.config import settings


def create_socket_server() -> socketio.AsyncServer:
    origins: str | list[str] = "*" if "*" in settings.CORS_ORIGINS else settings.CORS_ORIGINS
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=origins,
        logger=False,
        engineio_logger=False,
    )


def extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Pull the bearer token out of a Socket.IO handshake."""
    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token.strip():
            return _strip_bearer(auth_token)

    query_string = environ.get("QUERY_STRING", "")
    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")
    token = parse_qs(str(query_string)).get("token", [None])[0]
    if token:
        return token

    header = environ.get("HTTP_AUTHORIZATION", "")
    if isinstance(header, str) and header.lower().startswith("bearer "):
        return _strip_bearer(header) or None

    return None


def _strip_bearer(value: str) -> str:
    value = value.strip()
    if value.lower().startswith("bearer "):
        value = value[7:].strip()
    return value
