"""Application layer DTOs"""

from src.service.storefront.app.dto.booking_request import BookingRequest
from src.service.storefront.app.dto.booking_snapshot import BookingSnapshot
from src.service.storefront.app.dto.lock_result import LockResult
from src.service.storefront.app.dto.notification import Notification
from src.service.storefront.app.dto.verification_result import VerificationResult

__all__ = [
    'BookingRequest',
    'BookingSnapshot',
    'LockResult',
    'Notification',
    'VerificationResult',
]
