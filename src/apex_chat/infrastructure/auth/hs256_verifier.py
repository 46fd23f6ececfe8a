from __future__ import annotations

import jwt

from apex_chat.application.dto.principal import Principal
from apex_chat.application.exceptions import AuthenticationError
from apex_chat.domain.value_objects.enums import UserRole


class HS256Verifier:
    """Verify JWTs signed with the shared secret used by the REST API.

    Claims: ``userId`` (or ``sub``), ``role``, ``email``, ``iat``, ``exp``.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    async def verify(self, token: str) -> Principal:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationError("Token expired") from exc
        except jwt.PyJWTError as exc:
            raise AuthenticationError("Invalid token") from exc

        user_id = payload.get("userId", payload.get("sub"))
        if user_id in (None, ""):
            raise AuthenticationError("Token has no user id")
        try:
            role = UserRole(payload.get("role", UserRole.CANDIDATE))
        except ValueError:
            role = UserRole.CANDIDATE
        return Principal(
            user_id=str(user_id),
            role=role,
            email=payload.get("email"),
        )
