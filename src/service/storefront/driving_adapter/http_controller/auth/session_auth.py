from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, Request, Response

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import AuthenticationError
from src.service.storefront.driving_adapter.http_controller.storefront_session import (
    StorefrontSession,
    StorefrontSessionRegistry,
)


def _session_cookie(request: Request) -> Optional[str]:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def set_session_cookie(response: Response, session: StorefrontSession) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session.session_id,
        httponly=True,
        samesite='lax',
        secure=not settings.DEBUG,
    )


@inject
async def get_storefront_session(
    request: Request,
    response: Response,
    registry: StorefrontSessionRegistry = Depends(Provide[Container.session_registry]),
) -> StorefrontSession:
    """Current browser's session; a new one is created (and its cookie set) on first visit."""
    session = registry.get(_session_cookie(request))
    if session is None:
        session = registry.create()
        set_session_cookie(response, session)
    return session


@inject
async def require_storefront_session(
    request: Request,
    registry: StorefrontSessionRegistry = Depends(Provide[Container.session_registry]),
) -> StorefrontSession:
    session = registry.get(_session_cookie(request))
    if session is None:
        raise AuthenticationError('No storefront session, start from the event page')
    return session


@inject
async def get_session_registry(
    registry: StorefrontSessionRegistry = Depends(Provide[Container.session_registry]),
) -> StorefrontSessionRegistry:
    return registry
