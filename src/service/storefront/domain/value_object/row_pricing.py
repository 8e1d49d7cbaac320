"""
Row Pricing Value Objects

A schedule prices its seats by contiguous row ranges, e.g. rows A-C at 500
and D-F at 300. Ranges within one schedule must not overlap.
"""

from typing import Iterator

import attrs

from src.service.storefront.domain.value_object.seat_id import row_sort_key


def _upper(value: str) -> str:
    return value.strip().upper()


def _non_negative(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if value < 0:
        raise ValueError(f'Row price {attribute.name} cannot be negative')


@attrs.define(frozen=True)
class RowPricing:
    row_from: str = attrs.field(converter=_upper)
    row_to: str = attrs.field(converter=_upper)
    price: int = attrs.field(validator=_non_negative)

    def __attrs_post_init__(self) -> None:
        if not self.row_from.isalpha() or not self.row_to.isalpha():
            raise ValueError(f'Row range must use row letters: {self.label}')
        if row_sort_key(self.row_from) > row_sort_key(self.row_to):
            raise ValueError(f'Row range is reversed: {self.label}')

    @property
    def label(self) -> str:
        return f'{self.row_from}-{self.row_to}'

    def contains(self, row: str) -> bool:
        key = row_sort_key(row.upper())
        return row_sort_key(self.row_from) <= key <= row_sort_key(self.row_to)

    def overlaps(self, other: 'RowPricing') -> bool:
        return not (
            row_sort_key(self.row_to) < row_sort_key(other.row_from)
            or row_sort_key(other.row_to) < row_sort_key(self.row_from)
        )


@attrs.define(frozen=True)
class RowPricingTable:
    """Ordered row-pricing ranges of one schedule."""

    ranges: tuple[RowPricing, ...] = attrs.field(factory=tuple, converter=tuple)

    def __iter__(self) -> Iterator[RowPricing]:
        return iter(self.ranges)

    def __len__(self) -> int:
        return len(self.ranges)

    def overlapping_pairs(self) -> list[tuple[RowPricing, RowPricing]]:
        return [
            (first, second)
            for index, first in enumerate(self.ranges)
            for second in self.ranges[index + 1 :]
            if first.overlaps(second)
        ]

    def price_for_row(self, row: str) -> int | None:
        """Price of the first range holding `row`, for legends only; sales use resolve_price."""
        for pricing in self.ranges:
            if pricing.contains(row):
                return pricing.price
        return None
