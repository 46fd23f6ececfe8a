from __future__ import annotations

import logging
from contextvars import ContextVar
from logging.config import dictConfig

from apex_chat.config import settings

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(correlation_id)s | %(message)s"
JSON_FORMAT = (
    '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s",'
    '"request_id":"%(correlation_id)s","message":"%(message)s"}'
)


class CorrelationIdFilter(logging.Filter):
    """Attach the current HTTP request id (or "-") to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_ctx.get() or "-"
        return True


def setup_logging(level: str | None = None) -> None:
    formatter = "json" if settings.LOG_FORMAT == "json" else "default"
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "correlation_id": {"()": CorrelationIdFilter},
            },
            "formatters": {
                "default": {"format": LOG_FORMAT},
                "json": {"format": JSON_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": formatter,
                    "filters": ["correlation_id"],
                },
            },
            "root": {
                "level": level or settings.LOG_LEVEL,
                "handlers": ["console"],
            },
            "loggers": {
                # python-socketio / engineio are chatty at INFO
                "socketio": {"level": "WARNING"},
                "engineio": {"level": "WARNING"},
            },
        }
    )
