from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import socketio
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apex_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from apex_chat.api.v1.routers import admin, conversations, health
from apex_chat.application.exceptions import (
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from apex_chat.config import settings
from apex_chat.container import ChatContainer, build_container
from apex_chat.infrastructure.memory.seed import seed_demo_data
from apex_chat.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    container: ChatContainer = app.state.container
    if settings.CHAT_SEED_DEMO_DATA:
        seed_demo_data(container.store, container.clock)
    logger.info("Chat service started (socket.io path=/%s)", settings.SOCKETIO_PATH)

    yield

    logger.info(
        "Chat service stopping with %d live sockets",
        container.gateway.connections.connection_count,
    )


def create_app(container: ChatContainer | None = None) -> FastAPI:
    app = FastAPI(
        title="ApprenticeApex Chat Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.container = container or build_container()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(conversations.router)
    app.include_router(admin.router)

    return app


def create_asgi_app() -> socketio.ASGIApp:
    """HTTP API and Socket.IO on one port; the uvicorn factory entrypoint."""
    setup_logging()
    app = create_app()
    return socketio.ASGIApp(
        app.state.container.sio,
        other_asgi_app=app,
        socketio_path=settings.SOCKETIO_PATH,
    )


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ForbiddenError)
    async def _forbidden(_req: Request, exc: ForbiddenError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})
