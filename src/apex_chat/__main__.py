"""Entrypoint: python -m apex_chat"""
from __future__ import annotations

import uvicorn

from apex_chat.config import settings


def main() -> None:
    uvicorn.run(
        "apex_chat.app:create_asgi_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
