from __future__ import annotations

from typing import Any

from pydantic import Field

from apex_chat.api.v1.schemas.common import WireModel


class NotificationRequest(WireModel):
    user_id: str = Field(min_length=1)
    title: str
    message: str
    type: str = "info"
    link: str | None = None
    data: dict[str, Any] | None = None

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude={"user_id"}, exclude_none=True)
