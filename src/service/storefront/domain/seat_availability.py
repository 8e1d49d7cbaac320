"""
Seat Availability

A seat's status is never stored. It is derived on every refresh from three
sets: seats booked (server), seats locked by anyone (server, polled), and
seats whose locks this client holds.

Precedence: booked > locked by me > locked by others > available.
"""

from collections import Counter
from typing import Iterable

import attrs

from src.service.storefront.domain.enum.seat_status import SeatStatus


def derive_seat_status(
    seat: str,
    *,
    booked: frozenset[str],
    locked: frozenset[str],
    mine: frozenset[str],
) -> SeatStatus:
    if seat in booked:
        return SeatStatus.BOOKED
    if seat in mine:
        return SeatStatus.LOCKED_BY_ME
    if seat in locked:
        return SeatStatus.LOCKED_BY_OTHERS
    return SeatStatus.AVAILABLE


@attrs.define(frozen=True)
class SeatAvailabilityView:
    booked: frozenset[str] = attrs.field(factory=frozenset, converter=frozenset)
    locked: frozenset[str] = attrs.field(factory=frozenset, converter=frozenset)
    mine: frozenset[str] = attrs.field(factory=frozenset, converter=frozenset)

    def status_of(self, seat: str) -> SeatStatus:
        return derive_seat_status(seat, booked=self.booked, locked=self.locked, mine=self.mine)

    def is_selectable(self, seat: str) -> bool:
        return self.status_of(seat) in (SeatStatus.AVAILABLE, SeatStatus.LOCKED_BY_ME)

    def statuses(self, seats: Iterable[str]) -> dict[str, SeatStatus]:
        return {seat: self.status_of(seat) for seat in seats}

    def counts(self, seats: Iterable[str]) -> dict[SeatStatus, int]:
        tally = Counter(self.status_of(seat) for seat in seats)
        return {status: tally.get(status, 0) for status in SeatStatus}

    def remaining(self, capacity: int) -> int:
        """Seats still sellable to anyone, the caller's own holds included as taken."""
        taken = self.booked | self.locked | self.mine
        return max(0, capacity - len(taken))
