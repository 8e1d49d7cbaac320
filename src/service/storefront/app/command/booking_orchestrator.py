"""
Booking Orchestrator

Drives one booking flow for one (event, schedule):

    SELECTING_SEATS → REVIEWING_TERMS → ENTERING_DETAILS → SUBMITTING → CONFIRMED | FAILED

- Seat selection locks newly added seats, releases removed ones and
  recomputes the price quote on every change
- Terms must be accepted explicitly before customer details are reachable
- Customer details are validated locally; a bad field never costs a submit
- Submission is non-re-entrant and never retried automatically
- A seat conflict on submit sends the flow back to seat selection with
  fresh booked/locked sets; any other failure goes back to details

Non-fatal failures become dismissible notifications instead of errors.
"""

from datetime import datetime
import time
from typing import Callable, Iterable, Optional

import anyio
from anyio.abc import TaskGroup, TaskStatus
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError, DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.storefront_metrics import metrics
from src.service.storefront.app.command.seat_lock_client import SeatLockClient
from src.service.storefront.app.dto.booking_request import BookingRequest
from src.service.storefront.app.dto.booking_snapshot import BookingSnapshot
from src.service.storefront.app.dto.notification import Notification
from src.service.storefront.app.interface.i_booking_service_gateway import (
    IBookingServiceGateway,
)
from src.service.storefront.domain.booking_flow import BookingFlow
from src.service.storefront.domain.domain_errors import (
    CustomerDetailsValidationError,
    PricingUndefinedError,
    RowPricingConflictError,
    ScheduleClosedError,
    SeatUnavailableError,
)
from src.service.storefront.domain.entity.booking_entity import BookingReceipt
from src.service.storefront.domain.entity.event_entity import Event, Schedule
from src.service.storefront.domain.enum.booking_step import BookingStep
from src.service.storefront.domain.enum.notification_kind import NotificationKind
from src.service.storefront.domain.pricing import ConvenienceFeePolicy, PriceQuote, quote
from src.service.storefront.domain.seat_availability import SeatAvailabilityView
from src.service.storefront.domain.value_object.customer_details import CustomerDetails
from src.service.storefront.domain.value_object.seat_id import SeatId
from src.service.storefront.domain.value_object.seat_map import MAIN_HALL_SEAT_MAP, SeatMap


class BookingOrchestrator:
    def __init__(
        self,
        *,
        gateway: IBookingServiceGateway,
        event_id: str,
        schedule_id: str,
        seat_map: SeatMap = MAIN_HALL_SEAT_MAP,
        fee_policy: Optional[ConvenienceFeePolicy] = None,
        poll_interval: float = settings.LOCK_POLL_INTERVAL_SECONDS,
        min_phone_digits: int = settings.MIN_PHONE_DIGITS,
        idle_timeout: float = settings.SEAT_LOCK_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.gateway = gateway
        self.event_id = event_id
        self.schedule_id = schedule_id
        self.seat_map = seat_map
        self.fee_policy = fee_policy or ConvenienceFeePolicy()
        self.poll_interval = poll_interval
        self.min_phone_digits = min_phone_digits
        self.idle_timeout = idle_timeout
        self.clock = clock
        self.seat_lock_client = SeatLockClient(
            gateway=gateway, event_id=event_id, schedule_id=schedule_id
        )
        self.flow = BookingFlow()
        self.event: Optional[Event] = None
        self.schedule: Optional[Schedule] = None
        self.customer: Optional[CustomerDetails] = None
        self.is_staff = False
        self.booking_id: Optional[str] = None
        self.current_quote: Optional[PriceQuote] = None
        self.pricing_error = ''
        self._notifications: dict[str, Notification] = {}
        self._submitting = False
        self._active = False
        self._poll_scope: Optional[anyio.CancelScope] = None
        self._poll_pending = False
        self._last_activity = clock()
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def start(self) -> BookingSnapshot:
        """
        Load the event and schedule, then the booked and locked seat sets

        Raises:
            NotFoundError: unknown event or schedule
            ScheduleClosedError: schedule no longer sells seats
        """
        with self.tracer.start_as_current_span(
            'booking.start',
            attributes={'event.id': self.event_id, 'schedule.id': self.schedule_id},
        ):
            self.event = await self.gateway.get_event(event_id=self.event_id)
            self.schedule = self.event.get_schedule(self.schedule_id)
            if not self.schedule.is_open:
                raise ScheduleClosedError(self.schedule_id)

            for first, second in self.schedule.row_pricing.overlapping_pairs():
                Logger.base.warning(
                    f'💰 [BOOKING] Overlapping row pricing on {self.schedule_id}: '
                    f'{first.label} / {second.label}'
                )

            await self.seat_lock_client.refresh()
            self.is_staff = await self._check_staff_access()

        self._active = True
        metrics.active_booking_flows.inc()
        self._requote()
        Logger.base.info(
            f'🎫 [BOOKING] Flow started for {self.event_id}/{self.schedule_id} '
            f'(booked={len(self.seat_lock_client.booked)}, staff={self.is_staff})'
        )
        return self.snapshot()

    @Logger.io
    async def select_seats(self, seats: Iterable[str]) -> BookingSnapshot:
        """
        Make the held selection equal to `seats`

        New seats are checked against the hall layout and the current
        availability view before any lock call. Seats the server refuses are
        dropped from the selection and reported.
        """
        self.touch()
        self.flow.require(BookingStep.SELECTING_SEATS)
        wanted = list(dict.fromkeys(SeatId.parse(seat).token for seat in seats))
        held = self.seat_lock_client.held_seats

        removed = [seat for seat in held if seat not in wanted]
        added = [seat for seat in wanted if seat not in held]

        if removed:
            await self.seat_lock_client.release_locks(removed)
            # Released seats stay in the last polled set until refreshed
            try:
                await self.seat_lock_client.get_locked_seats()
            except CustomBaseError as e:
                Logger.base.warning(f'🔁 [BOOKING] Locked-seat refresh after release failed: {e}')

        accepted, rejected = self._screen_new_seats(added)
        if rejected:
            self._notify(
                NotificationKind.AVAILABILITY_CONFLICT,
                'Some seats cannot be selected right now',
                seats=rejected,
                action='choose_other_seats',
            )

        if accepted:
            try:
                result = await self.seat_lock_client.lock_seats(accepted)
            except CustomBaseError as e:
                Logger.base.warning(f'🔒 [BOOKING] Lock call failed: {e}')
                self._notify(
                    NotificationKind.TRANSPORT,
                    e.message,
                    seats=accepted,
                    action='retry_selection',
                )
            else:
                if result.failed_seats:
                    self._notify(
                        NotificationKind.AVAILABILITY_CONFLICT,
                        'Some seats are already locked by another user',
                        seats=result.failed_seats,
                        action='choose_other_seats',
                    )

        self._requote()
        return self.snapshot()

    async def toggle_seat(self, seat: str) -> BookingSnapshot:
        token = SeatId.parse(seat).token
        held = list(self.seat_lock_client.held_seats)
        if token in held:
            held.remove(token)
        else:
            held.append(token)
        return await self.select_seats(held)

    def request_terms(self) -> BookingSnapshot:
        """
        Raises:
            DomainError: nothing selected
            PricingUndefinedError / RowPricingConflictError: a seat has no single price
        """
        self.flow.require(BookingStep.SELECTING_SEATS)
        if not self.seat_lock_client.held_seats:
            raise DomainError('Please select at least one seat')
        self._quote_or_raise()
        self.flow.transition(BookingStep.REVIEWING_TERMS)
        return self.snapshot()

    def accept_terms(self) -> BookingSnapshot:
        self.flow.accept_terms()
        return self.snapshot()

    def decline_terms(self) -> BookingSnapshot:
        """Back to seat selection; locks stay held."""
        self.flow.require(BookingStep.REVIEWING_TERMS)
        self.flow.transition(BookingStep.SELECTING_SEATS)
        return self.snapshot()

    def change_seats(self) -> BookingSnapshot:
        self.flow.require(BookingStep.ENTERING_DETAILS)
        self.flow.transition(BookingStep.SELECTING_SEATS)
        return self.snapshot()

    def enter_details(self, *, name: str, phone: str, email: str) -> BookingSnapshot:
        self.flow.require(BookingStep.ENTERING_DETAILS)
        self.customer = CustomerDetails.create(
            name=name, phone=phone, email=email, min_phone_digits=self.min_phone_digits
        )
        return self.snapshot()

    async def submit(self) -> Optional[BookingReceipt]:
        """
        Create the booking from the held seats and the computed final amount

        Returns:
            None when a submission is already in flight, otherwise the receipt
            (success=False when the flow went back to an earlier step)
        """
        self.touch()
        if self._submitting:
            Logger.base.info(f'⏳ [BOOKING] Submit ignored, already submitting {self.schedule_id}')
            return None
        self._submitting = True
        try:
            return await self._submit()
        finally:
            self._submitting = False

    @Logger.io
    async def _submit(self) -> BookingReceipt:
        self.flow.require(BookingStep.ENTERING_DETAILS)
        if self.customer is None:
            raise CustomerDetailsValidationError({'customer': 'Please fill all customer details'})
        price = self._quote_or_raise()
        request = BookingRequest(
            event_id=self.event_id,
            schedule_id=self.schedule_id,
            customer=self.customer,
            seats=price.seats,
            total_amount=price.final_amount,
        )
        create = self.gateway.create_admin_booking if self.is_staff else self.gateway.create_booking

        self.flow.transition(BookingStep.SUBMITTING)
        with self.tracer.start_as_current_span(
            'booking.submit',
            attributes={
                'schedule.id': self.schedule_id,
                'seat.count': len(request.seats),
                'booking.amount': request.total_amount,
                'booking.admin': self.is_staff,
            },
        ):
            try:
                receipt = await create(request=request)
            except SeatUnavailableError as e:
                return await self._fail_back_to_seats(e)
            except CustomBaseError as e:
                return self._fail_back_to_details(e.message, action='retry_submission')

        if not receipt.success or not receipt.booking_id:
            if receipt.unavailable_seats:
                return await self._fail_back_to_seats(
                    SeatUnavailableError(receipt.unavailable_seats, receipt.message)
                )
            return self._fail_back_to_details(
                receipt.message or 'Booking could not be created', action='retry_submission'
            )

        self.flow.transition(BookingStep.CONFIRMED)
        self.booking_id = receipt.booking_id
        self.seat_lock_client.forget(price.seats)
        self.stop_polling()
        self._deactivate()
        metrics.record_submission(outcome='confirmed')
        Logger.base.info(
            f'✅ [BOOKING] Confirmed {receipt.booking_id} for {list(price.seats)} '
            f'amount={price.final_amount}'
        )
        return receipt

    async def _fail_back_to_seats(self, error: SeatUnavailableError) -> BookingReceipt:
        self.flow.transition(BookingStep.FAILED)
        self.flow.transition(BookingStep.SELECTING_SEATS)
        metrics.record_submission(outcome='seat_conflict')
        Logger.base.warning(f'⚠️ [BOOKING] Seats lost before booking: {list(error.seats)}')

        try:
            await self.seat_lock_client.refresh()
        except CustomBaseError as e:
            Logger.base.warning(f'⚠️ [BOOKING] Could not refresh seats after conflict: {e}')

        booked = self.seat_lock_client.booked
        lost = [
            seat
            for seat in self.seat_lock_client.held_seats
            if seat in error.seats or seat in booked
        ]
        self.seat_lock_client.forget(lost)
        self._requote()
        self._notify(
            NotificationKind.AVAILABILITY_CONFLICT,
            error.message,
            seats=lost or error.seats,
            action='reselect_seats',
        )
        return BookingReceipt(success=False, message=error.message, unavailable_seats=lost)

    def _fail_back_to_details(self, message: str, *, action: str) -> BookingReceipt:
        self.flow.transition(BookingStep.FAILED)
        self.flow.transition(BookingStep.ENTERING_DETAILS)
        metrics.record_submission(outcome='failed')
        Logger.base.warning(f'⚠️ [BOOKING] Submission failed: {message}')
        self._notify(NotificationKind.BOOKING_FAILED, message, action=action)
        return BookingReceipt(success=False, message=message)

    async def abandon(self) -> None:
        """Stop polling and release held seats; safe to call more than once."""
        self.stop_polling()
        with anyio.CancelScope(shield=True):
            await self.seat_lock_client.release_all()
        self._deactivate()

    async def close(self) -> None:
        if self.flow.step != BookingStep.CONFIRMED:
            await self.abandon()

    async def poll_locked_seats(
        self, *, task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED
    ) -> None:
        """
        Refresh locked-by-anyone seats every poll interval

        Only refreshes while selecting seats. Runs until the booking is
        confirmed, `stop_polling` is called, or the flow has seen no activity
        for longer than the idle timeout (`resume_polling` restarts it).
        """
        with anyio.CancelScope() as scope:
            self._poll_scope = scope
            self._poll_pending = False
            task_status.started()
            while self._active and not self.flow.is_finished:
                await anyio.sleep(self.poll_interval)
                if self.is_idle:
                    Logger.base.info(
                        f'💤 [BOOKING] Polling stopped for idle flow {self.schedule_id}'
                    )
                    break
                if self.flow.step != BookingStep.SELECTING_SEATS:
                    continue
                try:
                    await self.seat_lock_client.get_locked_seats()
                except CustomBaseError as e:
                    Logger.base.warning(f'🔁 [BOOKING] Locked-seat poll failed: {e}')
        self._poll_scope = None

    def stop_polling(self) -> None:
        if self._poll_scope is not None:
            self._poll_scope.cancel()

    @property
    def is_polling(self) -> bool:
        return self._poll_scope is not None or self._poll_pending

    def resume_polling(self, task_group: TaskGroup) -> None:
        """Restart a poll loop that stopped on idleness; no-op while one runs."""
        if self.is_polling or self.flow.is_finished or not self._active:
            return
        self._poll_pending = True
        task_group.start_soon(self.poll_locked_seats)

    def touch(self) -> None:
        self._last_activity = self.clock()

    @property
    def is_idle(self) -> bool:
        return self.clock() - self._last_activity > self.idle_timeout

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return tuple(self._notifications.values())

    def dismiss_notification(self, notification_id: str) -> None:
        if self._notifications.pop(notification_id, None) is None:
            raise NotFoundError(f'Notification {notification_id} not found')

    @property
    def step(self) -> BookingStep:
        return self.flow.step

    @property
    def lock_expires_at(self) -> Optional[datetime]:
        return self.seat_lock_client.lock_expires_at

    def view(self) -> SeatAvailabilityView:
        return self.seat_lock_client.view()

    def quote(self) -> PriceQuote:
        return self._quote_or_raise()

    def snapshot(self) -> BookingSnapshot:
        view = self.view()
        seats = tuple(self.seat_map)
        return BookingSnapshot(
            event_id=self.event_id,
            schedule_id=self.schedule_id,
            step=self.flow.step,
            history=tuple(self.flow.history),
            selected_seats=self.seat_lock_client.held_seats,
            seat_statuses=view.statuses(seats),
            status_counts=view.counts(seats),
            quote=self.current_quote,
            pricing_error=self.pricing_error,
            customer=self.customer,
            is_staff=self.is_staff,
            booking_id=self.booking_id,
            lock_expires_at=self.lock_expires_at,
            notifications=self.notifications,
        )

    def _screen_new_seats(self, seats: list[str]) -> tuple[list[str], list[str]]:
        view = self.view()
        capacity = self.seat_map.capacity
        if self.schedule is not None and self.schedule.slot_capacity > 0:
            capacity = min(capacity, self.schedule.slot_capacity)
        room = view.remaining(capacity)

        accepted: list[str] = []
        rejected: list[str] = []
        for seat in seats:
            if not self.seat_map.contains(seat) or not view.is_selectable(seat):
                rejected.append(seat)
            elif len(accepted) >= room:
                rejected.append(seat)
            else:
                accepted.append(seat)
        return accepted, rejected

    def _requote(self) -> None:
        try:
            self.current_quote = self._quote_or_raise()
            self.pricing_error = ''
        except (PricingUndefinedError, RowPricingConflictError) as e:
            self.current_quote = None
            if e.message != self.pricing_error:
                self._notify(
                    NotificationKind.PRICING_UNDEFINED,
                    e.message,
                    seats=(e.seat,),
                    action='choose_other_seats',
                )
            self.pricing_error = e.message

    def _quote_or_raise(self) -> PriceQuote:
        ranges = self.schedule.row_pricing if self.schedule is not None else ()
        return quote(self.seat_lock_client.held_seats, ranges, self.fee_policy)

    async def _check_staff_access(self) -> bool:
        try:
            return await self.gateway.check_staff_access()
        except CustomBaseError as e:
            Logger.base.info(f'👤 [BOOKING] Staff access check failed, booking as customer: {e}')
            return False

    def _notify(
        self,
        kind: NotificationKind,
        message: str,
        *,
        seats: Iterable[str] = (),
        action: str = '',
    ) -> None:
        notification = Notification(kind=kind, message=message, seats=seats, action=action)
        self._notifications[notification.id] = notification

    def _deactivate(self) -> None:
        if self._active:
            self._active = False
            metrics.active_booking_flows.dec()
