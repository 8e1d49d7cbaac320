"""Seat lock outcome DTO."""

import attrs


@attrs.define(frozen=True)
class LockResult:
    """
    Per-seat outcome of one lock request.

    A seat appears in exactly one of the two tuples. Seats in `failed_seats`
    are held by another client and must never be treated as ours.
    """

    locked_seats: tuple[str, ...] = attrs.field(factory=tuple, converter=tuple)
    failed_seats: tuple[str, ...] = attrs.field(factory=tuple, converter=tuple)

    @property
    def fully_locked(self) -> bool:
        return not self.failed_seats
