"""
Seat Id Value Object

A seat token is the row label followed by the seat number ("C7", "AA12").
"""

import re

import attrs

from src.service.storefront.domain.domain_errors import InvalidSeatError


_SEAT_PATTERN = re.compile(r'^([A-Za-z]+)(\d+)$')


def row_sort_key(row: str) -> tuple[int, str]:
    """Alphabetic row order where longer labels come after shorter ones (Z < AA)."""
    return len(row), row


@attrs.define(frozen=True)
class SeatId:
    row: str
    number: int

    @property
    def token(self) -> str:
        return f'{self.row}{self.number}'

    @classmethod
    def parse(cls, token: str) -> 'SeatId':
        match = _SEAT_PATTERN.match(token.strip()) if isinstance(token, str) else None
        if not match or int(match.group(2)) <= 0:
            raise InvalidSeatError(token)
        return cls(row=match.group(1).upper(), number=int(match.group(2)))

    def __str__(self) -> str:
        return self.token
