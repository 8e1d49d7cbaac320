"""
Unit tests for the pricing resolver

Covers per-seat price resolution over row ranges, totals, and the
convenience fee with its GST breakdown.
"""

from decimal import Decimal
from itertools import permutations

import pytest

from src.service.storefront.domain.domain_errors import (
    InvalidSeatError,
    PricingUndefinedError,
    RowPricingConflictError,
)
from src.service.storefront.domain.pricing import (
    ConvenienceFeePolicy,
    compute_total,
    quote,
    resolve_price,
    round_half_up,
)
from src.service.storefront.domain.value_object.row_pricing import RowPricing


@pytest.fixture
def ranges() -> list[RowPricing]:
    return [
        RowPricing(row_from='A', row_to='C', price=500),
        RowPricing(row_from='D', row_to='F', price=300),
    ]


@pytest.mark.unit
class TestResolvePrice:
    @pytest.mark.parametrize(
        'seat,expected',
        [('A1', 500), ('C24', 500), ('D1', 300), ('f12', 300)],
    )
    def test_seat_priced_by_its_row_range(
        self, ranges: list[RowPricing], seat: str, expected: int
    ) -> None:
        assert resolve_price(seat, ranges) == expected

    def test_row_outside_every_range_is_undefined(self, ranges: list[RowPricing]) -> None:
        with pytest.raises(PricingUndefinedError) as exc_info:
            resolve_price('G9', ranges)

        assert exc_info.value.seat == 'G9'
        assert exc_info.value.status_code == 422

    def test_no_ranges_at_all_is_undefined(self) -> None:
        with pytest.raises(PricingUndefinedError):
            resolve_price('A1', [])

    def test_overlapping_ranges_are_rejected_not_first_match(self) -> None:
        overlapping = [
            RowPricing(row_from='A', row_to='D', price=500),
            RowPricing(row_from='D', row_to='F', price=300),
        ]

        with pytest.raises(RowPricingConflictError) as exc_info:
            resolve_price('D4', overlapping)

        assert 'A-D' in exc_info.value.message
        assert 'D-F' in exc_info.value.message

    def test_malformed_seat_token(self, ranges: list[RowPricing]) -> None:
        with pytest.raises(InvalidSeatError):
            resolve_price('12A', ranges)


@pytest.mark.unit
class TestComputeTotal:
    def test_total_is_sum_of_seat_prices(self, ranges: list[RowPricing]) -> None:
        assert compute_total(['A1', 'D2'], ranges) == 800

    def test_total_does_not_depend_on_range_order(self, ranges: list[RowPricing]) -> None:
        assert compute_total(['A1', 'D2'], list(reversed(ranges))) == 800

    def test_total_does_not_depend_on_seat_order(self, ranges: list[RowPricing]) -> None:
        totals = {compute_total(seats, ranges) for seats in permutations(['A1', 'D2', 'B3'])}

        assert totals == {1300}

    def test_empty_selection_totals_zero(self, ranges: list[RowPricing]) -> None:
        assert compute_total([], ranges) == 0

    def test_one_unpriced_seat_fails_the_whole_total(self, ranges: list[RowPricing]) -> None:
        with pytest.raises(PricingUndefinedError):
            compute_total(['A1', 'G9'], ranges)


@pytest.mark.unit
class TestConvenienceFee:
    def test_fee_is_twelve_percent_rounded_half_up(self) -> None:
        policy = ConvenienceFeePolicy(rate=Decimal('0.12'))

        assert policy.fee_for(800) == 96
        # 12% of 125 = 15.0, of 137 = 16.44, of 146 = 17.52
        assert policy.fee_for(125) == 15
        assert policy.fee_for(137) == 16
        assert policy.fee_for(146) == 18

    def test_half_rounds_up(self) -> None:
        assert round_half_up(Decimal('2.5')) == 3
        assert round_half_up(Decimal('3.5')) == 4

    def test_no_fee_on_zero_subtotal(self) -> None:
        assert ConvenienceFeePolicy().fee_for(0) == 0

    def test_gst_breakdown_is_contained_in_the_fee(self) -> None:
        policy = ConvenienceFeePolicy(rate=Decimal('0.12'), gst_rate=Decimal('0.18'))

        breakdown = policy.breakdown(96)

        assert breakdown.base == 81
        assert breakdown.gst == 15
        assert breakdown.base + breakdown.gst == 96

    def test_rate_is_configurable(self) -> None:
        assert ConvenienceFeePolicy(rate='0.10').fee_for(800) == 80


@pytest.mark.unit
class TestQuote:
    def test_selected_seats_price_end_to_end(self, ranges: list[RowPricing]) -> None:
        price = quote(['A1', 'D2'], ranges, ConvenienceFeePolicy(rate=Decimal('0.12')))

        assert price.seats == ('A1', 'D2')
        assert price.subtotal == 800
        assert price.convenience_fee == 96
        assert price.final_amount == 896

    def test_empty_selection_has_no_fee(self, ranges: list[RowPricing]) -> None:
        price = quote([], ranges)

        assert price.final_amount == 0
        assert price.fee_breakdown.base == 0
        assert price.fee_breakdown.gst == 0

    def test_unpriced_seat_gives_no_quote(self, ranges: list[RowPricing]) -> None:
        with pytest.raises(PricingUndefinedError):
            quote(['G9'], ranges)
