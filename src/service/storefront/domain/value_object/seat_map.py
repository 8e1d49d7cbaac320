"""
Seat Map Value Object

Physical layout of the hall: each row has a left and a right block of
numbered seats. Used to reject seats that do not exist and to work out how
many seats are still sellable.
"""

from typing import Iterator

import attrs

from src.service.storefront.domain.value_object.seat_id import SeatId, row_sort_key


@attrs.define(frozen=True)
class RowLayout:
    row: str
    left: tuple[int, ...]
    right: tuple[int, ...]

    @property
    def numbers(self) -> tuple[int, ...]:
        return self.left + self.right


@attrs.define(frozen=True)
class SeatMap:
    rows: tuple[RowLayout, ...]

    @classmethod
    def from_blocks(cls, blocks: dict[str, tuple[range, range]]) -> 'SeatMap':
        return cls(
            rows=tuple(
                RowLayout(row=row.upper(), left=tuple(left), right=tuple(right))
                for row, (left, right) in sorted(blocks.items(), key=lambda item: row_sort_key(item[0]))
            )
        )

    def __iter__(self) -> Iterator[str]:
        for layout in self.rows:
            for number in layout.numbers:
                yield f'{layout.row}{number}'

    @property
    def capacity(self) -> int:
        return sum(len(layout.numbers) for layout in self.rows)

    @property
    def row_labels(self) -> tuple[str, ...]:
        return tuple(layout.row for layout in self.rows)

    def contains(self, seat: str) -> bool:
        seat_id = SeatId.parse(seat)
        return any(
            layout.row == seat_id.row and seat_id.number in layout.numbers for layout in self.rows
        )


def _standard_row() -> tuple[range, range]:
    return range(1, 13), range(13, 25)


# Main hall: rows A-S, row A is shorter at the front, row J loses its last seat
MAIN_HALL_SEAT_MAP = SeatMap.from_blocks(
    {
        'A': (range(1, 6), range(6, 15)),
        **{row: _standard_row() for row in 'BCDEFGHI'},
        'J': (range(1, 13), range(13, 24)),
        **{row: _standard_row() for row in 'KLMNOPQRS'},
    }
)
