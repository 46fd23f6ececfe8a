"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from apex_chat.application.dto.principal import Principal
from apex_chat.application.exceptions import AuthenticationError
from apex_chat.application.policies.permissions import assert_admin
from apex_chat.container import ChatContainer
from apex_chat.infrastructure.memory.uow import InMemoryUoW
from apex_chat.realtime.gateway import ChatGateway

_bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> ChatContainer:
    return request.app.state.container


ContainerDep = Annotated[ChatContainer, Depends(get_container)]


def get_uow(container: ContainerDep) -> InMemoryUoW:
    return container.uow()


UoWDep = Annotated[InMemoryUoW, Depends(get_uow)]


def get_gateway(container: ContainerDep) -> ChatGateway:
    return container.gateway


GatewayDep = Annotated[ChatGateway, Depends(get_gateway)]


async def get_current_principal(
    container: ContainerDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
) -> Principal:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return await container.verifier.verify(credentials.credentials)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.detail,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


async def get_current_admin(principal: CurrentPrincipal) -> Principal:
    assert_admin(principal)
    return principal


CurrentAdmin = Annotated[Principal, Depends(get_current_admin)]
