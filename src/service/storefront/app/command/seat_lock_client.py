"""
Seat Lock Client

Keeps one coherent "what can I select right now" view for a single
(event, schedule) booking flow while other clients mutate the same seat
inventory on the Remote Booking Service.

Rules:
- A seat becomes ours only after the server acknowledges the lock
- Seats already held are never re-requested
- Failed seats are dropped and the locked set is refreshed at once
- Releases are best-effort; the server-side lock TTL is the real cleanup
"""

from datetime import UTC, datetime, timedelta
from typing import Iterable, Optional

from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.storefront_metrics import metrics
from src.service.storefront.app.dto.lock_result import LockResult
from src.service.storefront.app.interface.i_booking_service_gateway import (
    IBookingServiceGateway,
)
from src.service.storefront.domain.seat_availability import SeatAvailabilityView


def _unique(seats: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(seats))


class SeatLockClient:
    def __init__(
        self,
        *,
        gateway: IBookingServiceGateway,
        event_id: str,
        schedule_id: str,
        lock_ttl_seconds: int = settings.SEAT_LOCK_TTL_SECONDS,
    ) -> None:
        self.gateway = gateway
        self.event_id = event_id
        self.schedule_id = schedule_id
        self.lock_ttl_seconds = lock_ttl_seconds
        self.booked: frozenset[str] = frozenset()
        self.locked: frozenset[str] = frozenset()
        self._held: dict[str, None] = {}  # insertion-ordered set
        self.locked_at: Optional[datetime] = None
        self.tracer = trace.get_tracer(__name__)

    @property
    def held_seats(self) -> tuple[str, ...]:
        return tuple(self._held)

    @property
    def lock_expires_at(self) -> Optional[datetime]:
        if not self._held or self.locked_at is None:
            return None
        return self.locked_at + timedelta(seconds=self.lock_ttl_seconds)

    def view(self) -> SeatAvailabilityView:
        return SeatAvailabilityView(booked=self.booked, locked=self.locked, mine=self._held)

    async def get_booked_seats(self) -> frozenset[str]:
        self.booked = await self.gateway.get_booked_seats(
            event_id=self.event_id, schedule_id=self.schedule_id
        )
        return self.booked

    async def get_locked_seats(self) -> frozenset[str]:
        self.locked = await self.gateway.get_locked_seats(schedule_id=self.schedule_id)
        return self.locked

    async def refresh(self) -> SeatAvailabilityView:
        await self.get_booked_seats()
        await self.get_locked_seats()
        return self.view()

    @Logger.io
    async def lock_seats(self, seats: Iterable[str]) -> LockResult:
        """
        Lock the seats not yet held by this client

        Returns:
            LockResult limited to the seats actually requested

        Raises:
            ServiceUnavailableError: the lock call itself failed; nothing is held
        """
        requested = [seat for seat in _unique(seats) if seat not in self._held]
        if not requested:
            return LockResult()

        with self.tracer.start_as_current_span(
            'seat_lock.lock',
            attributes={'schedule.id': self.schedule_id, 'seat.count': len(requested)},
        ):
            result = await self.gateway.lock_seats(
                event_id=self.event_id, schedule_id=self.schedule_id, seats=requested
            )

        failed_set = set(result.failed_seats)
        locked_set = set(result.locked_seats) - failed_set
        failed = [seat for seat in requested if seat in failed_set]
        acknowledged = [seat for seat in requested if seat in locked_set]
        for seat in acknowledged:
            self._held[seat] = None
        if acknowledged:
            self.locked_at = datetime.now(UTC)
        metrics.record_lock_result(locked=len(acknowledged), failed=len(failed))

        if failed:
            Logger.base.warning(
                f'🔒 [SEAT-LOCK] {len(failed)} seat(s) already held elsewhere '
                f'on {self.schedule_id}: {failed}'
            )
            await self._refresh_locked_after_conflict()
        else:
            Logger.base.info(f'🔒 [SEAT-LOCK] Locked {acknowledged} on {self.schedule_id}')

        return LockResult(locked_seats=acknowledged, failed_seats=failed)

    async def release_locks(self, seats: Iterable[str]) -> bool:
        """Best-effort release; the seats leave the held set whatever the outcome."""
        to_release = [seat for seat in _unique(seats) if seat in self._held]
        if not to_release:
            return True
        for seat in to_release:
            del self._held[seat]
        if not self._held:
            self.locked_at = None

        try:
            released = await self.gateway.release_seats(
                schedule_id=self.schedule_id, seats=to_release
            )
        except CustomBaseError as e:
            Logger.base.warning(
                f'🔓 [SEAT-LOCK] Release of {to_release} failed, leaving it to lock expiry: {e}'
            )
            released = False

        metrics.record_release(ok=released)
        if released:
            Logger.base.info(f'🔓 [SEAT-LOCK] Released {to_release} on {self.schedule_id}')
        return released

    async def release_all(self) -> bool:
        return await self.release_locks(self.held_seats)

    def forget(self, seats: Iterable[str]) -> None:
        """Drop seats from the held set without a release call (the server already took them)."""
        for seat in seats:
            self._held.pop(seat, None)
        if not self._held:
            self.locked_at = None

    async def _refresh_locked_after_conflict(self) -> None:
        try:
            await self.get_locked_seats()
        except CustomBaseError as e:
            Logger.base.warning(f'🔒 [SEAT-LOCK] Could not refresh locked seats: {e}')
