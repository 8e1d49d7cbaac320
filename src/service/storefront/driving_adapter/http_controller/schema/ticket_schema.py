from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel

from src.service.storefront.domain.entity.booking_entity import Ticket


class TicketResponse(BaseModel):
    booking_id: str
    customer_name: str
    phone: str
    email: str
    event_title: str
    event_date: Optional[date] = None
    event_time: Optional[time] = None
    seats: List[str]
    total_amount: int
    booking_date: Optional[datetime] = None
    status: str
    qr_payload: str

    @classmethod
    def from_ticket(cls, ticket: Ticket) -> 'TicketResponse':
        booking = ticket.booking
        return cls(
            booking_id=booking.id,
            customer_name=booking.customer_name,
            phone=booking.phone,
            email=booking.email,
            event_title=booking.event_title,
            event_date=booking.event_date,
            event_time=booking.event_time,
            seats=list(booking.seats),
            total_amount=booking.total_amount,
            booking_date=booking.booking_date,
            status=booking.status,
            qr_payload=ticket.qr_payload,
        )
