from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from src.service.storefront.app.dto.booking_snapshot import BookingSnapshot
from src.service.storefront.app.dto.notification import Notification
from src.service.storefront.domain.entity.booking_entity import BookingReceipt
from src.service.storefront.domain.pricing import PriceQuote


class SeatSelectionRequest(BaseModel):
    seats: List[str]

    class Config:
        json_schema_extra = {'example': {'seats': ['A1', 'D2']}}


class TermsDecisionRequest(BaseModel):
    accepted: bool

    class Config:
        json_schema_extra = {'example': {'accepted': True}}


class CustomerDetailsRequest(BaseModel):
    name: str
    phone: str
    email: str

    class Config:
        json_schema_extra = {
            'example': {'name': 'Anna Joseph', 'phone': '9847012345', 'email': 'anna@example.com'}
        }


class PriceQuoteResponse(BaseModel):
    subtotal: int
    convenience_fee: int
    fee_base: int
    fee_gst: int
    final_amount: int

    @classmethod
    def from_quote(cls, quote: PriceQuote) -> 'PriceQuoteResponse':
        return cls(
            subtotal=quote.subtotal,
            convenience_fee=quote.convenience_fee,
            fee_base=quote.fee_breakdown.base,
            fee_gst=quote.fee_breakdown.gst,
            final_amount=quote.final_amount,
        )


class NotificationResponse(BaseModel):
    id: str
    kind: str
    message: str
    seats: List[str]
    action: str

    @classmethod
    def from_notification(cls, notification: Notification) -> 'NotificationResponse':
        return cls(
            id=notification.id,
            kind=notification.kind.value,
            message=notification.message,
            seats=list(notification.seats),
            action=notification.action,
        )


class CustomerResponse(BaseModel):
    name: str
    phone: str
    email: str


class BookingFlowResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'event_id': 'EVT-0001',
                'schedule_id': 'SCH-0001',
                'step': 'selecting_seats',
                'history': ['selecting_seats'],
                'selected_seats': ['A1', 'D2'],
                'seat_statuses': {'A1': 'locked_by_me', 'A2': 'booked', 'A3': 'available'},
                'status_counts': {'available': 440, 'locked_by_me': 2, 'booked': 8},
                'quote': {
                    'subtotal': 800,
                    'convenience_fee': 96,
                    'fee_base': 81,
                    'fee_gst': 15,
                    'final_amount': 896,
                },
                'pricing_error': '',
                'customer': None,
                'is_staff': False,
                'booking_id': None,
                'lock_expires_at': '2026-11-01T18:05:00Z',
                'notifications': [],
            }
        },
    }

    event_id: str
    schedule_id: str
    step: str
    history: List[str]
    selected_seats: List[str]
    seat_statuses: Dict[str, str]
    status_counts: Dict[str, int]
    quote: Optional[PriceQuoteResponse] = None
    pricing_error: str = ''
    customer: Optional[CustomerResponse] = None
    is_staff: bool = False
    booking_id: Optional[str] = None
    lock_expires_at: Optional[datetime] = None
    notifications: List[NotificationResponse] = []

    @classmethod
    def from_snapshot(cls, snapshot: BookingSnapshot) -> 'BookingFlowResponse':
        return cls(
            event_id=snapshot.event_id,
            schedule_id=snapshot.schedule_id,
            step=snapshot.step.value,
            history=[step.value for step in snapshot.history],
            selected_seats=list(snapshot.selected_seats),
            seat_statuses={seat: status.value for seat, status in snapshot.seat_statuses.items()},
            status_counts={status.value: count for status, count in snapshot.status_counts.items()},
            quote=PriceQuoteResponse.from_quote(snapshot.quote) if snapshot.quote else None,
            pricing_error=snapshot.pricing_error,
            customer=(
                CustomerResponse(
                    name=snapshot.customer.name,
                    phone=snapshot.customer.phone,
                    email=snapshot.customer.email,
                )
                if snapshot.customer
                else None
            ),
            is_staff=snapshot.is_staff,
            booking_id=snapshot.booking_id,
            lock_expires_at=snapshot.lock_expires_at,
            notifications=[NotificationResponse.from_notification(n) for n in snapshot.notifications],
        )


class BookingSubmitResponse(BaseModel):
    accepted: bool
    success: bool = False
    booking_id: Optional[str] = None
    message: str = ''
    unavailable_seats: List[str] = []
    flow: BookingFlowResponse

    @classmethod
    def build(
        cls, *, receipt: Optional[BookingReceipt], snapshot: BookingSnapshot
    ) -> 'BookingSubmitResponse':
        flow = BookingFlowResponse.from_snapshot(snapshot)
        if receipt is None:
            return cls(accepted=False, message='A submission is already in progress', flow=flow)
        return cls(
            accepted=True,
            success=receipt.success,
            booking_id=receipt.booking_id,
            message=receipt.message,
            unavailable_seats=list(receipt.unavailable_seats),
            flow=flow,
        )
