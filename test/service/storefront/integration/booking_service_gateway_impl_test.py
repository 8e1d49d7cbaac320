"""
BookingServiceGatewayImpl against a scripted Remote Booking Service

Full stack below the application layer: gateway → RpcClient → httpx, with
httpx.MockTransport answering per remote method.
"""

from typing import Any

import anyio
import httpx
import orjson
import pytest

from src.platform.constant.remote_method import (
    CHECK_SCANNER_ACCESS,
    CREATE_ADMIN_BOOKING,
    CREATE_BOOKING,
    GET_BOOKED_SEATS,
    GET_CSRF_TOKEN,
    GET_EVENT,
    GET_LOCKED_SEATS,
    GET_SECURE_QR_CODE,
    LIST_EVENTS,
    LOCK_SEATS,
    LOGIN,
    LOGOUT,
    RELEASE_SEATS,
    RPC_BASE,
    VERIFY_AND_LOG_ENTRY,
)
from src.platform.exception.exceptions import (
    LoginError,
    NotFoundError,
    ServiceUnavailableError,
)
from src.platform.http.rpc_client import build_rpc_client
from src.service.storefront.app.command.booking_orchestrator import BookingOrchestrator
from src.service.storefront.app.dto.booking_request import BookingRequest
from src.service.storefront.domain.domain_errors import SeatUnavailableError
from src.service.storefront.domain.enum.booking_step import BookingStep
from src.service.storefront.domain.enum.seat_status import SeatStatus
from src.service.storefront.domain.value_object.customer_details import CustomerDetails
from src.service.storefront.driven_adapter.booking_service_gateway_impl import (
    BookingServiceGatewayImpl,
)


EVENT_MESSAGE = {
    'name': 'EVT-0001',
    'event_title': 'Classical Evening',
    'venue': 'Main Hall',
    'schedules': [
        {
            'name': 'SCH-0001',
            'show_date': '2026-11-01',
            'show_time': '18:30:00',
            'row_wise_pricing': [{'row_from': 'A', 'row_to': 'C', 'price': 500}],
        }
    ],
}


class ScriptedBookingService:
    """Answers each remote method with a scripted (status, body) pair."""

    def __init__(self) -> None:
        self.responses: dict[str, tuple[int, dict[str, Any]]] = {
            GET_CSRF_TOKEN: (200, {'message': 'csrf-token'}),
        }
        self.calls: list[tuple[str, Any]] = []

    def reply(self, method: str, message: Any = None, *, status_code: int = 200, **body: Any) -> None:
        if status_code == 200:
            body['message'] = message
        self.responses[method] = (status_code, body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        method = request.url.path.removeprefix(f'{RPC_BASE}/')
        payload = orjson.loads(request.content) if request.content else dict(request.url.params)
        self.calls.append((method, payload))
        status_code, body = self.responses.get(method, (404, {'exc_type': 'DoesNotExistError'}))
        return httpx.Response(status_code, content=orjson.dumps(body))

    def payload_of(self, method: str) -> Any:
        return next(payload for called, payload in self.calls if called == method)


@pytest.fixture
def remote() -> ScriptedBookingService:
    return ScriptedBookingService()


@pytest.fixture
def gateway(remote: ScriptedBookingService) -> BookingServiceGatewayImpl:
    rpc_client = build_rpc_client(
        base_url='http://booking.test', transport=httpx.MockTransport(remote)
    )
    return BookingServiceGatewayImpl(rpc_client=rpc_client)


@pytest.fixture
def booking_request() -> BookingRequest:
    return BookingRequest(
        event_id='EVT-0001',
        schedule_id='SCH-0001',
        customer=CustomerDetails.create(
            name='Anna Joseph', phone='9847012345', email='anna@example.com'
        ),
        seats=['A1', 'D2'],
        total_amount=896,
    )


class TestCatalog:
    @pytest.mark.asyncio
    async def test_list_events(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> None:
        remote.reply(LIST_EVENTS, [EVENT_MESSAGE])

        events = await gateway.list_events(search='classical')

        assert [event.title for event in events] == ['Classical Evening']
        assert remote.payload_of(LIST_EVENTS) == {'search': 'classical'}

    @pytest.mark.asyncio
    async def test_get_event_maps_schedules_and_pricing(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> None:
        remote.reply(GET_EVENT, EVENT_MESSAGE)

        event = await gateway.get_event(event_id='EVT-0001')

        schedule = event.get_schedule('SCH-0001')
        assert schedule.row_pricing.price_for_row('B') == 500

    @pytest.mark.asyncio
    async def test_empty_event_is_not_found(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> None:
        remote.reply(GET_EVENT, None)

        with pytest.raises(NotFoundError):
            await gateway.get_event(event_id='EVT-404')

    @pytest.mark.asyncio
    async def test_malformed_event_is_a_transport_failure(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> None:
        remote.reply(GET_EVENT, {'event_title': 'No id'})

        with pytest.raises(ServiceUnavailableError):
            await gateway.get_event(event_id='EVT-0001')

    @pytest.mark.asyncio
    async def test_reversed_row_range_is_a_transport_failure(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> None:
        schedule = {
            **EVENT_MESSAGE['schedules'][0],
            'row_wise_pricing': [{'row_from': 'F', 'row_to': 'D', 'price': 300}],
        }
        remote.reply(GET_EVENT, {**EVENT_MESSAGE, 'schedules': [schedule]})

        with pytest.raises(ServiceUnavailableError):
            await gateway.get_event(event_id='EVT-0001')


class TestSeatLocks:
    @pytest.mark.asyncio
    async def test_booked_seats_from_comma_string(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> None:
        remote.reply(GET_BOOKED_SEATS, 'A1, A2')

        booked = await gateway.get_booked_seats(event_id='EVT-0001', schedule_id='SCH-0001')

        assert booked == frozenset({'A1', 'A2'})

    @pytest.mark.asyncio
    @pytest.mark.parametrize('message', [5, {'A1': True}, ['A1', 7]])
    async def test_malformed_locked_seats_is_a_transport_failure(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService, message: Any
    ) -> None:
        remote.reply(GET_LOCKED_SEATS, message)

        with pytest.raises(ServiceUnavailableError):
            await gateway.get_locked_seats(schedule_id='SCH-0001')

    @pytest.mark.asyncio
    async def test_lock_reports_partial_failure(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> None:
        remote.reply(LOCK_SEATS, {'success': False, 'failed_seats': ['B4']})

        result = await gateway.lock_seats(
            event_id='EVT-0001', schedule_id='SCH-0001', seats=['B3', 'B4']
        )

        assert result.locked_seats == ('B3',)
        assert result.failed_seats == ('B4',)
        assert remote.payload_of(LOCK_SEATS) == {
            'event_id': 'EVT-0001',
            'schedule_id': 'SCH-0001',
            'seats': ['B3', 'B4'],
        }

    @pytest.mark.asyncio
    async def test_lock_conflict_fails_every_seat(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> None:
        remote.reply(LOCK_SEATS, status_code=409, exc_type='ValidationError')

        result = await gateway.lock_seats(
            event_id='EVT-0001', schedule_id='SCH-0001', seats=['B3', 'B4']
        )

        assert result.locked_seats == ()
        assert result.failed_seats == ('B3', 'B4')

    @pytest.mark.asyncio
    async def test_release(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> None:
        remote.reply(RELEASE_SEATS, {'success': True})

        assert await gateway.release_seats(schedule_id='SCH-0001', seats=['B3']) is True


class TestBookings:
    @pytest.mark.asyncio
    async def test_create_booking_sends_customer_and_amount(
        self,
        gateway: BookingServiceGatewayImpl,
        remote: ScriptedBookingService,
        booking_request: BookingRequest,
    ) -> None:
        remote.reply(CREATE_BOOKING, {'success': True, 'booking_id': 'BKG-0001'})

        receipt = await gateway.create_booking(request=booking_request)

        assert receipt.success
        assert receipt.booking_id == 'BKG-0001'
        assert remote.payload_of(CREATE_BOOKING) == {
            'event_id': 'EVT-0001',
            'schedule_id': 'SCH-0001',
            'customer_name': 'Anna Joseph',
            'phone': '9847012345',
            'email': 'anna@example.com',
            'seats': ['A1', 'D2'],
            'total_amount': 896,
        }

    @pytest.mark.asyncio
    async def test_admin_booking_uses_its_own_method(
        self,
        gateway: BookingServiceGatewayImpl,
        remote: ScriptedBookingService,
        booking_request: BookingRequest,
    ) -> None:
        remote.reply(CREATE_ADMIN_BOOKING, {'success': True, 'booking_id': 'BKG-0002'})

        receipt = await gateway.create_admin_booking(request=booking_request)

        assert receipt.booking_id == 'BKG-0002'

    @pytest.mark.asyncio
    async def test_receipt_with_unavailable_seats_raises(
        self,
        gateway: BookingServiceGatewayImpl,
        remote: ScriptedBookingService,
        booking_request: BookingRequest,
    ) -> None:
        remote.reply(
            CREATE_BOOKING,
            {'success': False, 'message': 'Seats taken', 'unavailable_seats': 'A1'},
        )

        with pytest.raises(SeatUnavailableError) as exc_info:
            await gateway.create_booking(request=booking_request)

        assert exc_info.value.seats == ('A1',)

    @pytest.mark.asyncio
    async def test_malformed_receipt_is_a_transport_failure(
        self,
        gateway: BookingServiceGatewayImpl,
        remote: ScriptedBookingService,
        booking_request: BookingRequest,
    ) -> None:
        remote.reply(CREATE_BOOKING, {'success': False, 'unavailable_seats': 5})

        with pytest.raises(ServiceUnavailableError):
            await gateway.create_booking(request=booking_request)

    @pytest.mark.asyncio
    async def test_conflict_status_raises(
        self,
        gateway: BookingServiceGatewayImpl,
        remote: ScriptedBookingService,
        booking_request: BookingRequest,
    ) -> None:
        remote.reply(CREATE_BOOKING, status_code=409, exception='Seats no longer available')

        with pytest.raises(SeatUnavailableError):
            await gateway.create_booking(request=booking_request)

    @pytest.mark.asyncio
    async def test_missing_qr_payload(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> None:
        remote.reply(GET_SECURE_QR_CODE, '')

        with pytest.raises(ServiceUnavailableError):
            await gateway.get_secure_qr_code(booking_id='BKG-0001')


class TestStaffAndSession:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'message,expected',
        [({'has_access': True}, True), ({'has_access': False}, False), (True, True), (None, False)],
    )
    async def test_scanner_access(
        self,
        gateway: BookingServiceGatewayImpl,
        remote: ScriptedBookingService,
        message: Any,
        expected: bool,
    ) -> None:
        remote.reply(CHECK_SCANNER_ACCESS, message)

        assert await gateway.check_staff_access() is expected

    @pytest.mark.asyncio
    async def test_verify_entry_forwards_payload(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> None:
        remote.reply(
            VERIFY_AND_LOG_ENTRY,
            {'success': True, 'message': 'Welcome', 'customer': 'Anna', 'seats': 'A1,D2'},
        )

        result = await gateway.verify_entry(qr_string='BKG-0001:sig')

        assert result.success
        assert result.seats == ('A1', 'D2')
        assert remote.payload_of(VERIFY_AND_LOG_ENTRY) == {'qr_string': 'BKG-0001:sig'}

    @pytest.mark.asyncio
    async def test_login_without_csrf_and_bad_credentials(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> None:
        remote.reply(LOGIN, status_code=401, exc_type='AuthenticationError')

        with pytest.raises(LoginError):
            await gateway.login(usr='staff@example.com', pwd='wrong')

        assert all(method != GET_CSRF_TOKEN for method, _ in remote.calls)

    @pytest.mark.asyncio
    async def test_logout_resets_session_even_on_failure(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> None:
        remote.reply(LOGOUT, status_code=500)
        gateway.rpc_client.http_client.cookies.set('sid', 'abc')

        with pytest.raises(ServiceUnavailableError):
            await gateway.logout()

        assert not gateway.rpc_client.http_client.cookies


class TestMalformedRepliesInAFlow:
    @pytest.fixture
    def orchestrator(
        self, gateway: BookingServiceGatewayImpl, remote: ScriptedBookingService
    ) -> BookingOrchestrator:
        remote.reply(GET_EVENT, EVENT_MESSAGE)
        remote.reply(GET_BOOKED_SEATS, [])
        remote.reply(GET_LOCKED_SEATS, [])
        remote.reply(CHECK_SCANNER_ACCESS, {'has_access': False})
        return BookingOrchestrator(
            gateway=gateway, event_id='EVT-0001', schedule_id='SCH-0001', poll_interval=0.01
        )

    @pytest.mark.asyncio
    async def test_poll_loop_survives_a_malformed_locked_seat_list(
        self, orchestrator: BookingOrchestrator, remote: ScriptedBookingService
    ) -> None:
        await orchestrator.start()
        remote.reply(GET_LOCKED_SEATS, 5)

        async with anyio.create_task_group() as tg:
            await tg.start(orchestrator.poll_locked_seats)
            await anyio.sleep(0.05)
            remote.reply(GET_LOCKED_SEATS, 'B3')

            with anyio.fail_after(1):
                while orchestrator.view().status_of('B3') != SeatStatus.LOCKED_BY_OTHERS:
                    await anyio.sleep(0.01)
            orchestrator.stop_polling()

    @pytest.mark.asyncio
    async def test_malformed_receipt_goes_back_to_details(
        self, orchestrator: BookingOrchestrator, remote: ScriptedBookingService
    ) -> None:
        remote.reply(LOCK_SEATS, {'success': True, 'locked_seats': ['A1']})
        remote.reply(CREATE_BOOKING, {'success': False, 'unavailable_seats': 5})
        await orchestrator.start()
        await orchestrator.select_seats(['A1'])
        orchestrator.request_terms()
        orchestrator.accept_terms()
        orchestrator.enter_details(
            name='Anna Joseph', phone='9847012345', email='anna@example.com'
        )

        receipt = await orchestrator.submit()

        assert receipt is not None
        assert not receipt.success
        assert orchestrator.step == BookingStep.ENTERING_DETAILS
