from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.storefront.driving_adapter.http_controller.auth.session_auth import (
    get_session_registry,
    get_storefront_session,
    require_storefront_session,
)
from src.service.storefront.driving_adapter.http_controller.schema.booking_schema import (
    BookingFlowResponse,
    BookingSubmitResponse,
    CustomerDetailsRequest,
    SeatSelectionRequest,
    TermsDecisionRequest,
)
from src.service.storefront.driving_adapter.http_controller.storefront_session import (
    StorefrontSession,
    StorefrontSessionRegistry,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.get('', response_model=BookingFlowResponse)
async def get_booking_flow(
    session: StorefrontSession = Depends(require_storefront_session),
) -> BookingFlowResponse:
    return BookingFlowResponse.from_snapshot(session.require_booking().snapshot())


@router.put('/seats', response_model=BookingFlowResponse)
@Logger.io
async def select_seats(
    request: SeatSelectionRequest,
    session: StorefrontSession = Depends(require_storefront_session),
) -> BookingFlowResponse:
    snapshot = await session.require_booking().select_seats(request.seats)
    return BookingFlowResponse.from_snapshot(snapshot)


@router.post('/seats/{seat}/toggle', response_model=BookingFlowResponse)
@Logger.io
async def toggle_seat(
    seat: str,
    session: StorefrontSession = Depends(require_storefront_session),
) -> BookingFlowResponse:
    snapshot = await session.require_booking().toggle_seat(seat)
    return BookingFlowResponse.from_snapshot(snapshot)


@router.post('/review', response_model=BookingFlowResponse)
@Logger.io
async def request_terms(
    session: StorefrontSession = Depends(require_storefront_session),
) -> BookingFlowResponse:
    return BookingFlowResponse.from_snapshot(session.require_booking().request_terms())


@router.post('/terms', response_model=BookingFlowResponse)
@Logger.io
async def decide_terms(
    request: TermsDecisionRequest,
    session: StorefrontSession = Depends(require_storefront_session),
) -> BookingFlowResponse:
    booking = session.require_booking()
    snapshot = booking.accept_terms() if request.accepted else booking.decline_terms()
    return BookingFlowResponse.from_snapshot(snapshot)


@router.post('/change_seats', response_model=BookingFlowResponse)
@Logger.io
async def change_seats(
    session: StorefrontSession = Depends(require_storefront_session),
) -> BookingFlowResponse:
    return BookingFlowResponse.from_snapshot(session.require_booking().change_seats())


@router.post('/details', response_model=BookingFlowResponse)
@Logger.io
async def enter_details(
    request: CustomerDetailsRequest,
    session: StorefrontSession = Depends(require_storefront_session),
) -> BookingFlowResponse:
    snapshot = session.require_booking().enter_details(
        name=request.name, phone=request.phone, email=request.email
    )
    return BookingFlowResponse.from_snapshot(snapshot)


@router.post('/submit', response_model=BookingSubmitResponse)
@Logger.io
async def submit_booking(
    session: StorefrontSession = Depends(require_storefront_session),
) -> BookingSubmitResponse:
    booking = session.require_booking()
    with tracer.start_as_current_span('controller.submit_booking') as span:
        span.set_attribute('schedule.id', booking.schedule_id)
        receipt = await booking.submit()
    return BookingSubmitResponse.build(receipt=receipt, snapshot=booking.snapshot())


@router.delete('', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def abandon_booking(
    session: StorefrontSession = Depends(require_storefront_session),
) -> None:
    await session.end_booking()


@router.delete('/notification/{notification_id}', response_model=BookingFlowResponse)
async def dismiss_notification(
    notification_id: str,
    session: StorefrontSession = Depends(require_storefront_session),
) -> BookingFlowResponse:
    booking = session.require_booking()
    booking.dismiss_notification(notification_id)
    return BookingFlowResponse.from_snapshot(booking.snapshot())


@router.post(
    '/{event_id}/{schedule_id}',
    response_model=BookingFlowResponse,
    status_code=status.HTTP_201_CREATED,
)
@Logger.io
async def start_booking(
    event_id: str,
    schedule_id: str,
    session: StorefrontSession = Depends(get_storefront_session),
    registry: StorefrontSessionRegistry = Depends(get_session_registry),
) -> BookingFlowResponse:
    with tracer.start_as_current_span('controller.start_booking') as span:
        span.set_attribute('event.id', event_id)
        span.set_attribute('schedule.id', schedule_id)
        booking = await session.start_booking(
            event_id=event_id, schedule_id=schedule_id, task_group=registry.task_group
        )
    return BookingFlowResponse.from_snapshot(booking.snapshot())
