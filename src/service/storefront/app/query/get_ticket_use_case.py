"""
Get Ticket Use Case

A ticket is the confirmed booking plus the signed QR payload the gate will
scan. The payload is produced by the Remote Booking Service and is treated
as opaque text here.
"""

from src.platform.logging.loguru_io import Logger
from src.service.storefront.app.interface.i_booking_service_gateway import (
    IBookingServiceGateway,
)
from src.service.storefront.app.interface.i_ticket_qr_renderer import ITicketQrRenderer
from src.service.storefront.domain.entity.booking_entity import Ticket


class GetTicketUseCase:
    def __init__(
        self, *, gateway: IBookingServiceGateway, qr_renderer: ITicketQrRenderer
    ) -> None:
        self.gateway = gateway
        self.qr_renderer = qr_renderer

    @Logger.io
    async def get_ticket(self, *, booking_id: str) -> Ticket:
        booking = await self.gateway.get_booking(booking_id=booking_id)
        qr_payload = await self.gateway.get_secure_qr_code(booking_id=booking_id)
        Logger.base.info(f'🎟️ [TICKET] Loaded ticket for booking {booking_id} ({booking.status})')
        return Ticket(booking=booking, qr_payload=qr_payload)

    async def render_qr_png(self, *, booking_id: str) -> bytes:
        ticket = await self.get_ticket(booking_id=booking_id)
        return self.qr_renderer.render_png(ticket.qr_payload)
