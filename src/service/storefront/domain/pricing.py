"""
Pricing Resolver

Pure functions: seat + row-pricing ranges → price, seats → total, and the
convenience fee on top of the ticket subtotal. No I/O, no state.

The fee is a flat rate of the subtotal (12% by default). The GST figure shown
to customers is the tax portion contained INSIDE that fee, never an extra
charge on top of it.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

import attrs

from src.platform.config.core_setting import settings
from src.service.storefront.domain.domain_errors import (
    PricingUndefinedError,
    RowPricingConflictError,
)
from src.service.storefront.domain.value_object.row_pricing import RowPricing
from src.service.storefront.domain.value_object.seat_id import SeatId


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def resolve_price(seat: str, ranges: Iterable[RowPricing]) -> int:
    """
    Price of one seat.

    Raises:
        PricingUndefinedError: the seat's row is in no range
        RowPricingConflictError: the seat's row is in more than one range
    """
    row = SeatId.parse(seat).row
    matches = [pricing for pricing in ranges if pricing.contains(row)]
    if not matches:
        raise PricingUndefinedError(seat)
    if len(matches) > 1:
        raise RowPricingConflictError(seat, (pricing.label for pricing in matches))
    return matches[0].price


def compute_total(seats: Iterable[str], ranges: Iterable[RowPricing]) -> int:
    """Sum of seat prices; any unpriced seat fails the whole computation."""
    ranges = tuple(ranges)
    return sum(resolve_price(seat, ranges) for seat in seats)


@attrs.define(frozen=True)
class FeeBreakdown:
    base: int
    gst: int


@attrs.define(frozen=True)
class ConvenienceFeePolicy:
    rate: Decimal = attrs.field(default=settings.CONVENIENCE_FEE_RATE, converter=Decimal)
    gst_rate: Decimal = attrs.field(default=settings.FEE_GST_RATE, converter=Decimal)

    def fee_for(self, subtotal: int) -> int:
        if subtotal <= 0:
            return 0
        return round_half_up(Decimal(subtotal) * self.rate)

    def breakdown(self, fee: int) -> FeeBreakdown:
        gross = Decimal(1) + self.gst_rate
        return FeeBreakdown(
            base=round_half_up(Decimal(fee) / gross),
            gst=round_half_up(Decimal(fee) * self.gst_rate / gross),
        )


@attrs.define(frozen=True)
class PriceQuote:
    seats: tuple[str, ...]
    subtotal: int
    convenience_fee: int
    fee_breakdown: FeeBreakdown

    @property
    def final_amount(self) -> int:
        return self.subtotal + self.convenience_fee


def quote(
    seats: Sequence[str],
    ranges: Iterable[RowPricing],
    policy: ConvenienceFeePolicy | None = None,
) -> PriceQuote:
    policy = policy or ConvenienceFeePolicy()
    subtotal = compute_total(seats, ranges)
    fee = policy.fee_for(subtotal) if seats else 0
    return PriceQuote(
        seats=tuple(seats),
        subtotal=subtotal,
        convenience_fee=fee,
        fee_breakdown=policy.breakdown(fee),
    )
