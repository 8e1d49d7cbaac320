from enum import StrEnum


class NotificationKind(StrEnum):
    AVAILABILITY_CONFLICT = 'availability_conflict'
    PRICING_UNDEFINED = 'pricing_undefined'
    TRANSPORT = 'transport'
    BOOKING_FAILED = 'booking_failed'
    INFO = 'info'
