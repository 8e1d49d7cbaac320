"""Storefront domain errors."""

from typing import Iterable

from src.platform.exception.exceptions import ConflictError, DomainError


class InvalidSeatError(DomainError):
    def __init__(self, seat: str) -> None:
        super().__init__(f'Invalid seat: {seat!r}. Expected row letters + number (e.g. C7)', 400)
        self.seat = seat


class PricingUndefinedError(DomainError):
    """A seat's row falls in no row-pricing range; the seat cannot be sold."""

    def __init__(self, seat: str) -> None:
        super().__init__(f'No price is configured for seat {seat}', 422)
        self.seat = seat


class RowPricingConflictError(DomainError):
    """A seat's row falls in more than one row-pricing range."""

    def __init__(self, seat: str, ranges: Iterable[str]) -> None:
        super().__init__(
            f'Seat {seat} matches overlapping price ranges: {", ".join(ranges)}', 422
        )
        self.seat = seat


class SeatUnavailableError(ConflictError):
    """Seats were booked or locked by someone else before we got them."""

    def __init__(self, seats: Iterable[str], message: str = '') -> None:
        self.seats = tuple(seats)
        super().__init__(message or f'Seats no longer available: {", ".join(self.seats)}')


class InvalidStepTransitionError(DomainError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(f'Cannot move from {current} to {target}', 409)
        self.current = current
        self.target = target


class ScheduleClosedError(DomainError):
    def __init__(self, schedule_id: str) -> None:
        super().__init__(f'Schedule {schedule_id} is closed for booking', 409)


class CustomerDetailsValidationError(DomainError):
    def __init__(self, field_errors: dict[str, str]) -> None:
        super().__init__('Please correct the highlighted customer details', 422)
        self.field_errors = field_errors
