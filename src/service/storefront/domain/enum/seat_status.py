from enum import StrEnum


class SeatStatus(StrEnum):
    AVAILABLE = 'available'
    LOCKED_BY_OTHERS = 'locked_by_others'
    LOCKED_BY_ME = 'locked_by_me'
    BOOKED = 'booked'
