from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from shortlink.app.core.identity import CookieStorage, IdentityProvider
from shortlink.app.services.client import LinkServiceClient
from shortlink.app.utils.qr import PngQrRenderer
from shortlink.app.utils.types import QrRenderer
from shortlink.app.web.sessions import UserWorkspace, WorkspaceRegistry


@dataclass
class UserContext:
    user_id: str
    storage: CookieStorage
    workspace: UserWorkspace


def get_link_client(request: Request) -> LinkServiceClient:
    return request.app.state.link_client


def get_workspaces(request: Request) -> WorkspaceRegistry:
    return request.app.state.workspaces


@lru_cache
def get_qr_renderer() -> QrRenderer:
    return PngQrRenderer()


async def get_user_context(
    request: Request,
    client: Annotated[LinkServiceClient, Depends(get_link_client)],
    workspaces: Annotated[WorkspaceRegistry, Depends(get_workspaces)],
) -> UserContext:
    storage = CookieStorage(request)
    user_id = IdentityProvider(storage).get_or_create_user_id()
    return UserContext(user_id=user_id, storage=storage, workspace=workspaces.get(user_id, client))


CurrentUser = Annotated[UserContext, Depends(get_user_context)]
LinkClient = Annotated[LinkServiceClient, Depends(get_link_client)]
Renderer = Annotated[QrRenderer, Depends(get_qr_renderer)]
