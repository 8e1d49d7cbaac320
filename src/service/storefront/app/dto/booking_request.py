"""Create-booking request DTO."""

import attrs

from src.service.storefront.domain.value_object.customer_details import CustomerDetails


@attrs.define(frozen=True)
class BookingRequest:
    event_id: str
    schedule_id: str
    customer: CustomerDetails
    seats: tuple[str, ...] = attrs.field(converter=tuple)
    total_amount: int
