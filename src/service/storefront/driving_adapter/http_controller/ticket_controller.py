from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.storefront.app.interface.i_ticket_qr_renderer import ITicketQrRenderer
from src.service.storefront.app.query.get_ticket_use_case import GetTicketUseCase
from src.service.storefront.driving_adapter.http_controller.auth.session_auth import (
    get_storefront_session,
)
from src.service.storefront.driving_adapter.http_controller.schema.ticket_schema import (
    TicketResponse,
)
from src.service.storefront.driving_adapter.http_controller.storefront_session import (
    StorefrontSession,
)


router = APIRouter()


@inject
async def get_ticket_use_case(
    session: StorefrontSession = Depends(get_storefront_session),
    qr_renderer: ITicketQrRenderer = Depends(Provide[Container.ticket_qr_renderer]),
) -> GetTicketUseCase:
    return GetTicketUseCase(gateway=session.gateway, qr_renderer=qr_renderer)


@router.get('/{booking_id}', response_model=TicketResponse)
@Logger.io
async def get_ticket(
    booking_id: str,
    use_case: GetTicketUseCase = Depends(get_ticket_use_case),
) -> TicketResponse:
    ticket = await use_case.get_ticket(booking_id=booking_id)
    return TicketResponse.from_ticket(ticket)


@router.get('/{booking_id}/qr.png', response_class=Response)
@Logger.io
async def get_ticket_qr(
    booking_id: str,
    use_case: GetTicketUseCase = Depends(get_ticket_use_case),
) -> Response:
    png = await use_case.render_qr_png(booking_id=booking_id)
    return Response(
        content=png,
        media_type='image/png',
        headers={'Cache-Control': 'no-store'},
    )
