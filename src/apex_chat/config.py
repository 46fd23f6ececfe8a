from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    JWT_SECRET: str = "dev-secret-key-minimum-32-characters-long"
    JWT_ALGORITHM: str = "HS256"

    CORS_ORIGINS: list[str] = ["*"]

    SOCKETIO_PATH: str = "socket.io"

    MESSAGE_MAX_LENGTH: int = 2000
    MESSAGES_PAGE_SIZE: int = 50
    MESSAGES_PAGE_MAX: int = 200

    CHAT_SEED_DEMO_DATA: bool = False

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["text", "json"] = "text"

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
