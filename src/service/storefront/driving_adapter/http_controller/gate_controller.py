from typing import Union

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from src.platform.logging.loguru_io import Logger
from src.service.storefront.driving_adapter.http_controller.auth.session_auth import (
    get_storefront_session,
    require_storefront_session,
    set_session_cookie,
)
from src.service.storefront.driving_adapter.http_controller.schema.gate_schema import (
    GateStatusResponse,
    ScanRequest,
    ScanResponse,
    VerificationResponse,
)
from src.service.storefront.driving_adapter.http_controller.storefront_session import (
    StorefrontSession,
)


router = APIRouter()


@router.get('', response_model=GateStatusResponse)
@Logger.io
async def open_gate(
    session: StorefrontSession = Depends(get_storefront_session),
) -> Union[GateStatusResponse, RedirectResponse]:
    """Scanner view; callers without scanner access are sent to the login page."""
    granted = await session.gate.check_access()
    if not granted:
        redirect = RedirectResponse(
            url=session.navigator.location or session.navigator.login_path,
            status_code=status.HTTP_303_SEE_OTHER,
        )
        # The injected Response is discarded when another response is returned
        set_session_cookie(redirect, session)
        return redirect
    return GateStatusResponse(
        state=session.gate.state.value, scanner_active=session.gate.scanner_active
    )


@router.post('/scan', response_model=ScanResponse)
@Logger.io
async def scan_ticket(
    request: ScanRequest,
    session: StorefrontSession = Depends(require_storefront_session),
) -> ScanResponse:
    result = await session.gate.decode_and_verify(request.qr_string)
    if result is None:
        return ScanResponse(state=session.gate.state.value, dropped=True)
    return ScanResponse(
        state=session.gate.state.value, result=VerificationResponse.from_result(result)
    )


@router.post('/reset', response_model=GateStatusResponse)
async def reset_gate(
    session: StorefrontSession = Depends(require_storefront_session),
) -> GateStatusResponse:
    session.gate.reset()
    return GateStatusResponse(
        state=session.gate.state.value, scanner_active=session.gate.scanner_active
    )
