"""
Remote Booking Service payloads

Pydantic models for the `message` part of each RPC response, plus the
mapping to domain objects. The remote side is loose about types (seat lists
may arrive comma-joined, times without a leading zero, nulls for defaults),
so coercion happens here and nowhere else.
"""

import re
from datetime import date, datetime, time
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from src.service.storefront.app.dto.lock_result import LockResult
from src.service.storefront.app.dto.verification_result import VerificationResult
from src.service.storefront.domain.entity.booking_entity import Booking, BookingReceipt
from src.service.storefront.domain.entity.event_entity import Event, Schedule
from src.service.storefront.domain.value_object.row_pricing import RowPricing, RowPricingTable


_SHORT_HOUR = re.compile(r'^(\d):')


def seat_list(value: Any) -> list[str]:
    """Seat tokens from a comma-joined string or a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [seat.strip() for seat in value.split(',') if seat.strip()]
    if not isinstance(value, (list, tuple)) or not all(isinstance(seat, str) for seat in value):
        raise ValueError(f'Expected a seat list, got {type(value).__name__}')
    return [seat.strip() for seat in value if seat.strip()]


class _Payload(BaseModel):
    model_config = ConfigDict(extra='ignore')


class RowPricingPayload(_Payload):
    row_from: str
    row_to: str
    price: int = 0

    def to_entity(self) -> RowPricing:
        return RowPricing(row_from=self.row_from, row_to=self.row_to, price=self.price)


class SchedulePayload(_Payload):
    name: str
    show_date: date
    show_time: time
    slot_capacity: int = 0
    status: str = 'Open'
    row_wise_pricing: list[RowPricingPayload] = []

    @field_validator('show_time', mode='before')
    @classmethod
    def pad_hour(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _SHORT_HOUR.sub(r'0\1:', value.strip())
        return value

    def to_entity(self, *, event_id: str) -> Schedule:
        return Schedule(
            id=self.name,
            event_id=event_id,
            show_date=self.show_date,
            show_time=self.show_time,
            slot_capacity=self.slot_capacity,
            status=self.status,
            row_pricing=RowPricingTable(
                ranges=[pricing.to_entity() for pricing in self.row_wise_pricing]
            ),
        )


class EventPayload(_Payload):
    name: str
    event_title: str
    description: Optional[str] = None
    event_image: Optional[str] = None
    venue: Optional[str] = None
    max_capacity: Optional[int] = None
    status: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    day: Optional[str] = None
    price: Optional[int] = None
    schedules: list[SchedulePayload] = []

    def to_entity(self) -> Event:
        return Event(
            id=self.name,
            title=self.event_title,
            description=self.description or '',
            image=self.event_image or '/placeholder-event.jpg',
            venue=self.venue or 'TBA',
            max_capacity=self.max_capacity or 0,
            status=self.status or '',
            start_date=self.start_date,
            end_date=self.end_date,
            day=self.day or '',
            price=self.price or 0,
            schedules=[schedule.to_entity(event_id=self.name) for schedule in self.schedules],
        )


class LockSeatsPayload(_Payload):
    locked_seats: Optional[list[str]] = None
    failed_seats: list[str] = []

    @field_validator('locked_seats', 'failed_seats', mode='before')
    @classmethod
    def split_seats(cls, value: Any) -> Any:
        return value if value is None else seat_list(value)

    def to_result(self, *, requested: list[str]) -> LockResult:
        """A response listing only failures means every other requested seat was locked."""
        failed = [seat for seat in requested if seat in self.failed_seats]
        if self.locked_seats is None:
            locked = [seat for seat in requested if seat not in failed]
        else:
            locked = [seat for seat in requested if seat in self.locked_seats and seat not in failed]
        return LockResult(locked_seats=locked, failed_seats=failed)


class BookingReceiptPayload(_Payload):
    success: bool = False
    booking_id: Optional[str] = None
    message: Optional[str] = None
    unavailable_seats: list[str] = []

    @field_validator('unavailable_seats', mode='before')
    @classmethod
    def split_seats(cls, value: Any) -> list[str]:
        return seat_list(value)

    def to_entity(self) -> BookingReceipt:
        return BookingReceipt(
            success=self.success,
            booking_id=self.booking_id,
            message=self.message or '',
            unavailable_seats=self.unavailable_seats,
        )


class BookingPayload(_Payload):
    booking_id: Optional[str] = None
    name: Optional[str] = None
    customer_name: str = ''
    phone: str = ''
    email: str = ''
    event_title: str = ''
    event_date: Optional[date] = None
    event_time: Optional[time] = None
    seats: list[str] = []
    total_amount: float = 0
    booking_date: Optional[datetime] = None
    status: str = ''

    @field_validator('seats', mode='before')
    @classmethod
    def split_seats(cls, value: Any) -> list[str]:
        return seat_list(value)

    @field_validator('event_time', mode='before')
    @classmethod
    def pad_hour(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _SHORT_HOUR.sub(r'0\1:', value.strip())
        return value

    def to_entity(self, *, fallback_id: str) -> Booking:
        return Booking(
            id=self.booking_id or self.name or fallback_id,
            customer_name=self.customer_name,
            phone=self.phone,
            email=self.email,
            event_title=self.event_title,
            seats=self.seats,
            total_amount=round(self.total_amount),
            status=self.status,
            event_date=self.event_date,
            event_time=self.event_time,
            booking_date=self.booking_date,
        )


class VerificationPayload(_Payload):
    success: bool = False
    message: Optional[str] = None
    customer: Optional[str] = None
    seats: list[str] = []
    event: Optional[str] = None

    @field_validator('seats', mode='before')
    @classmethod
    def split_seats(cls, value: Any) -> list[str]:
        return seat_list(value)

    def to_result(self) -> VerificationResult:
        return VerificationResult(
            success=self.success,
            message=self.message or '',
            customer=self.customer or '',
            seats=self.seats,
            event=self.event or '',
        )
