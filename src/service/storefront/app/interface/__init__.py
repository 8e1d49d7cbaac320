"""Application layer interfaces (Ports)"""

from src.service.storefront.app.interface.i_booking_service_gateway import (
    IBookingServiceGateway,
)
from src.service.storefront.app.interface.i_navigator import INavigator
from src.service.storefront.app.interface.i_ticket_qr_renderer import ITicketQrRenderer

__all__ = [
    'IBookingServiceGateway',
    'INavigator',
    'ITicketQrRenderer',
]
