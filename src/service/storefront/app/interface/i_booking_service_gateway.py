"""
Booking Service Gateway Interface

Port to the Remote Booking Service, the sole authority over events,
seat locks, bookings and entry logs. Every call is one network round trip.

Implementations raise:
- ServiceUnavailableError: timeouts, connection failures, 5xx, malformed bodies
- SeatUnavailableError: seats taken by someone else (locking or booking)
- AuthenticationError / ForbiddenError / NotFoundError: as reported remotely
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from src.service.storefront.app.dto.booking_request import BookingRequest
from src.service.storefront.app.dto.lock_result import LockResult
from src.service.storefront.app.dto.verification_result import VerificationResult
from src.service.storefront.domain.entity.booking_entity import Booking, BookingReceipt
from src.service.storefront.domain.entity.event_entity import Event


class IBookingServiceGateway(ABC):
    @abstractmethod
    async def list_events(self, *, search: Optional[str] = None) -> list[Event]:
        pass

    @abstractmethod
    async def get_event(self, *, event_id: str) -> Event:
        """
        Get single event with its schedules and row pricing

        Raises:
            NotFoundError: unknown event
        """
        pass

    @abstractmethod
    async def get_booked_seats(self, *, event_id: str, schedule_id: str) -> frozenset[str]:
        pass

    @abstractmethod
    async def get_locked_seats(self, *, schedule_id: str) -> frozenset[str]:
        """Seats currently locked by ANY client, the caller included."""
        pass

    @abstractmethod
    async def lock_seats(
        self, *, event_id: str, schedule_id: str, seats: Iterable[str]
    ) -> LockResult:
        """
        Try to lock each seat; partial failure is a normal outcome

        Returns:
            LockResult with the acknowledged seats and the ones another
            client already holds
        """
        pass

    @abstractmethod
    async def release_seats(self, *, schedule_id: str, seats: Iterable[str]) -> bool:
        pass

    @abstractmethod
    async def create_booking(self, *, request: BookingRequest) -> BookingReceipt:
        """
        Convert held locks into a durable booking

        Raises:
            SeatUnavailableError: some seats were booked or re-locked by others
        """
        pass

    @abstractmethod
    async def create_admin_booking(self, *, request: BookingRequest) -> BookingReceipt:
        """Staff booking: payment is skipped and the booking is created as Paid."""
        pass

    @abstractmethod
    async def get_booking(self, *, booking_id: str) -> Booking:
        pass

    @abstractmethod
    async def get_secure_qr_code(self, *, booking_id: str) -> str:
        """Signed payload for the entry QR code; opaque to this client."""
        pass

    @abstractmethod
    async def check_staff_access(self) -> bool:
        pass

    @abstractmethod
    async def verify_entry(self, *, qr_string: str) -> VerificationResult:
        pass

    @abstractmethod
    async def login(self, *, usr: str, pwd: str) -> str:
        """Establish the remote session; returns the display name."""
        pass

    @abstractmethod
    async def logout(self) -> None:
        pass
