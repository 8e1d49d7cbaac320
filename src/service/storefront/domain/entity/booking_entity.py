from datetime import date, datetime, time
from enum import StrEnum
from typing import Optional

import attrs


class BookingStatus(StrEnum):
    PENDING_PAYMENT = 'Pending Payment'
    PAID = 'Paid'
    CANCELLED = 'Cancelled'


@attrs.define(frozen=True)
class Booking:
    """Confirmed booking as stored by the Remote Booking Service; read-only here."""

    id: str
    customer_name: str
    phone: str
    email: str
    event_title: str
    seats: tuple[str, ...] = attrs.field(converter=tuple)
    total_amount: int
    status: str
    event_date: Optional[date] = None
    event_time: Optional[time] = None
    booking_date: Optional[datetime] = None

    @property
    def is_paid(self) -> bool:
        return self.status == BookingStatus.PAID


@attrs.define(frozen=True)
class BookingReceipt:
    """Outcome of a create-booking call."""

    success: bool
    booking_id: Optional[str] = None
    message: str = ''
    unavailable_seats: tuple[str, ...] = attrs.field(factory=tuple, converter=tuple)


@attrs.define(frozen=True)
class Ticket:
    booking: Booking
    qr_payload: str
