from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.storefront.driving_adapter.http_controller.auth.session_auth import (
    get_storefront_session,
    require_storefront_session,
)
from src.service.storefront.driving_adapter.http_controller.schema.session_schema import (
    LoginRequest,
    SessionResponse,
)
from src.service.storefront.driving_adapter.http_controller.storefront_session import (
    StorefrontSession,
)


router = APIRouter()


@router.post('/login', response_model=SessionResponse)
@Logger.io
async def login(
    request: LoginRequest,
    session: StorefrontSession = Depends(get_storefront_session),
) -> SessionResponse:
    message = await session.login(usr=request.usr, pwd=request.pwd.get_secret_value())
    return SessionResponse(message=message, user=session.user)


@router.post('/logout', response_model=SessionResponse)
@Logger.io
async def logout(
    session: StorefrontSession = Depends(require_storefront_session),
) -> SessionResponse:
    await session.logout()
    return SessionResponse(message='Logged out')


@router.get('', response_model=SessionResponse)
async def current_session(
    session: StorefrontSession = Depends(get_storefront_session),
) -> SessionResponse:
    return SessionResponse(message='ok', user=session.user)
