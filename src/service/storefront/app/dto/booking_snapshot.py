"""Read model of one booking flow, recomputed on demand."""

from datetime import datetime
from typing import Optional

import attrs

from src.service.storefront.app.dto.notification import Notification
from src.service.storefront.domain.enum.booking_step import BookingStep
from src.service.storefront.domain.enum.seat_status import SeatStatus
from src.service.storefront.domain.pricing import PriceQuote
from src.service.storefront.domain.value_object.customer_details import CustomerDetails


@attrs.define(frozen=True)
class BookingSnapshot:
    event_id: str
    schedule_id: str
    step: BookingStep
    history: tuple[BookingStep, ...]
    selected_seats: tuple[str, ...]
    seat_statuses: dict[str, SeatStatus]
    status_counts: dict[SeatStatus, int]
    quote: Optional[PriceQuote] = None
    pricing_error: str = ''
    customer: Optional[CustomerDetails] = None
    is_staff: bool = False
    booking_id: Optional[str] = None
    lock_expires_at: Optional[datetime] = None
    notifications: tuple[Notification, ...] = ()
