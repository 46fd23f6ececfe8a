from __future__ import annotations

from fastapi import APIRouter

from apex_chat.api.deps import ContainerDep

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(container: ContainerDep) -> dict[str, object]:
    return {
        "status": "ready",
        "conversations": len(container.store.conversations),
        "messages": len(container.store.messages),
        "connections": container.gateway.connections.connection_count,
    }
