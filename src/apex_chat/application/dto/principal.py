from __future__ import annotations

from dataclasses import dataclass

from apex_chat.domain.value_objects.enums import UserRole


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller identity extracted from JWT."""

    user_id: str
    role: UserRole
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.MASTER_ADMIN)
