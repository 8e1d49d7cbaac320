"""
Booking Service Gateway (RPC implementation)

Maps each gateway operation to a whitelisted remote method and each remote
payload to a domain object. Seat races reported by the remote side (HTTP 409
or a receipt listing unavailable seats) become SeatUnavailableError; a
response that does not match the expected shape is a transport failure.
"""

from typing import Any, Callable, Iterable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from src.platform.constant.remote_method import (
    CHECK_SCANNER_ACCESS,
    CREATE_ADMIN_BOOKING,
    CREATE_BOOKING,
    GET_BOOKED_SEATS,
    GET_BOOKING,
    GET_EVENT,
    GET_LOCKED_SEATS,
    GET_SECURE_QR_CODE,
    LIST_EVENTS,
    LOCK_SEATS,
    LOGIN,
    LOGOUT,
    RELEASE_SEATS,
    VERIFY_AND_LOG_ENTRY,
)
from src.platform.exception.exceptions import (
    AuthenticationError,
    ConflictError,
    LoginError,
    NotFoundError,
    ServiceUnavailableError,
)
from src.platform.http.rpc_client import RpcClient
from src.platform.logging.loguru_io import Logger
from src.service.storefront.app.dto.booking_request import BookingRequest
from src.service.storefront.app.dto.lock_result import LockResult
from src.service.storefront.app.dto.verification_result import VerificationResult
from src.service.storefront.app.interface.i_booking_service_gateway import (
    IBookingServiceGateway,
)
from src.service.storefront.domain.domain_errors import SeatUnavailableError
from src.service.storefront.domain.entity.booking_entity import Booking, BookingReceipt
from src.service.storefront.domain.entity.event_entity import Event
from src.service.storefront.driven_adapter.schema.booking_service_payload import (
    BookingPayload,
    BookingReceiptPayload,
    EventPayload,
    LockSeatsPayload,
    VerificationPayload,
    seat_list,
)


_P = TypeVar('_P', bound=BaseModel)
_T = TypeVar('_T')


def _parse(model: type[_P], data: Any, *, method: str, convert: Callable[[_P], _T]) -> _T:
    """Validate a remote payload and map it to domain objects; a mismatch is a transport failure."""
    try:
        return convert(model.model_validate(data if data is not None else {}))
    except (ValidationError, ValueError, TypeError) as e:
        Logger.base.warning(f'📦 [GATEWAY] Unexpected payload from {method}: {e}')
        raise ServiceUnavailableError()


def _seats(data: Any, *, method: str) -> frozenset[str]:
    try:
        return frozenset(seat_list(data))
    except ValueError as e:
        Logger.base.warning(f'📦 [GATEWAY] Unexpected seat list from {method}: {e}')
        raise ServiceUnavailableError()


class BookingServiceGatewayImpl(IBookingServiceGateway):
    def __init__(self, *, rpc_client: RpcClient) -> None:
        self.rpc_client = rpc_client

    @Logger.io
    async def list_events(self, *, search: Optional[str] = None) -> list[Event]:
        data = await self.rpc_client.query(LIST_EVENTS, search=search)
        if not isinstance(data, list):
            data = []
        return [
            _parse(EventPayload, item, method=LIST_EVENTS, convert=EventPayload.to_entity)
            for item in data
        ]

    @Logger.io
    async def get_event(self, *, event_id: str) -> Event:
        data = await self.rpc_client.query(GET_EVENT, event_id=event_id)
        if not data:
            raise NotFoundError(f'Event {event_id} not found')
        return _parse(EventPayload, data, method=GET_EVENT, convert=EventPayload.to_entity)

    async def get_booked_seats(self, *, event_id: str, schedule_id: str) -> frozenset[str]:
        data = await self.rpc_client.query(
            GET_BOOKED_SEATS, event_id=event_id, schedule_id=schedule_id
        )
        return _seats(data, method=GET_BOOKED_SEATS)

    async def get_locked_seats(self, *, schedule_id: str) -> frozenset[str]:
        data = await self.rpc_client.query(GET_LOCKED_SEATS, schedule_id=schedule_id)
        return _seats(data, method=GET_LOCKED_SEATS)

    @Logger.io
    async def lock_seats(
        self, *, event_id: str, schedule_id: str, seats: Iterable[str]
    ) -> LockResult:
        requested = list(seats)
        try:
            data = await self.rpc_client.command(
                LOCK_SEATS,
                {'event_id': event_id, 'schedule_id': schedule_id, 'seats': requested},
            )
        except ConflictError as e:
            Logger.base.info(f'🔒 [GATEWAY] Lock rejected for all of {requested}: {e.message}')
            return LockResult(failed_seats=requested)
        return _parse(
            LockSeatsPayload,
            data,
            method=LOCK_SEATS,
            convert=lambda payload: payload.to_result(requested=requested),
        )

    @Logger.io
    async def release_seats(self, *, schedule_id: str, seats: Iterable[str]) -> bool:
        data = await self.rpc_client.command(
            RELEASE_SEATS, {'schedule_id': schedule_id, 'seats': list(seats)}
        )
        if isinstance(data, dict):
            return bool(data.get('success', True))
        return data is not False

    async def create_booking(self, *, request: BookingRequest) -> BookingReceipt:
        return await self._create(CREATE_BOOKING, request)

    async def create_admin_booking(self, *, request: BookingRequest) -> BookingReceipt:
        return await self._create(CREATE_ADMIN_BOOKING, request)

    @Logger.io
    async def get_booking(self, *, booking_id: str) -> Booking:
        data = await self.rpc_client.query(GET_BOOKING, booking_id=booking_id)
        if not data:
            raise NotFoundError(f'Booking {booking_id} not found')
        return _parse(
            BookingPayload,
            data,
            method=GET_BOOKING,
            convert=lambda payload: payload.to_entity(fallback_id=booking_id),
        )

    async def get_secure_qr_code(self, *, booking_id: str) -> str:
        data = await self.rpc_client.query(GET_SECURE_QR_CODE, booking_id=booking_id)
        if not isinstance(data, str) or not data:
            raise ServiceUnavailableError()
        return data

    async def check_staff_access(self) -> bool:
        data = await self.rpc_client.query(CHECK_SCANNER_ACCESS)
        if isinstance(data, dict):
            return bool(data.get('has_access'))
        return data is True

    @Logger.io
    async def verify_entry(self, *, qr_string: str) -> VerificationResult:
        data = await self.rpc_client.command(VERIFY_AND_LOG_ENTRY, {'qr_string': qr_string})
        return _parse(
            VerificationPayload,
            data,
            method=VERIFY_AND_LOG_ENTRY,
            convert=VerificationPayload.to_result,
        )

    @Logger.io
    async def login(self, *, usr: str, pwd: str) -> str:
        self.rpc_client.reset_session()
        try:
            data = await self.rpc_client.command_without_csrf(LOGIN, {'usr': usr, 'pwd': pwd})
        except AuthenticationError:
            raise LoginError('Invalid username or password')
        return data if isinstance(data, str) else 'Logged In'

    @Logger.io
    async def logout(self) -> None:
        try:
            await self.rpc_client.command(LOGOUT)
        finally:
            self.rpc_client.reset_session()

    async def _create(self, method: str, request: BookingRequest) -> BookingReceipt:
        payload = {
            'event_id': request.event_id,
            'schedule_id': request.schedule_id,
            'customer_name': request.customer.name,
            'phone': request.customer.phone,
            'email': request.customer.email,
            'seats': list(request.seats),
            'total_amount': request.total_amount,
        }
        try:
            data = await self.rpc_client.command(method, payload)
        except ConflictError as e:
            raise SeatUnavailableError((), e.message)

        receipt = _parse(
            BookingReceiptPayload, data, method=method, convert=BookingReceiptPayload.to_entity
        )
        if not receipt.success and receipt.unavailable_seats:
            raise SeatUnavailableError(receipt.unavailable_seats, receipt.message)
        return receipt
