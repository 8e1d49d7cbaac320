from enum import StrEnum


class BookingStep(StrEnum):
    SELECTING_SEATS = 'selecting_seats'
    REVIEWING_TERMS = 'reviewing_terms'
    ENTERING_DETAILS = 'entering_details'
    SUBMITTING = 'submitting'
    CONFIRMED = 'confirmed'
    FAILED = 'failed'
