"""Tests for passenger-band pricing."""

import pytest

from routedesk.models.agency_route import RouteType
from routedesk.services.pricing import (
    PassengerPriceRange,
    PriceBreakdown,
    PricingTable,
    apply_surcharges,
    calculate_price,
    get_price_breakdown,
)


def _table(pricing=None, waiting_time_rate=10, extra_passenger_rate=20):
    if pricing is None:
        pricing = [
            {
                "routeType": "single",
                "passengerRanges": [
                    {"minPassengers": 1, "maxPassengers": 3, "price": 100},
                    {"minPassengers": 4, "maxPassengers": 7, "price": 150},
                ],
            }
        ]
    return PricingTable.from_dicts(
        pricing,
        waiting_time_rate=waiting_time_rate,
        extra_passenger_rate=extra_passenger_rate,
    )


@pytest.mark.unit
class TestBandMatching:

    def test_count_in_second_band(self):
        assert calculate_price(_table(), RouteType.SINGLE, 5) == 150

    def test_band_edges_are_inclusive(self):
        table = _table()
        assert calculate_price(table, "single", 1) == 100
        assert calculate_price(table, "single", 3) == 100
        assert calculate_price(table, "single", 4) == 150
        assert calculate_price(table, "single", 7) == 150

    def test_count_above_every_band_is_unpriced(self):
        table = _table()
        assert calculate_price(table, "single", 10) is None
        assert get_price_breakdown(table, "single", 10) is None

    def test_unknown_route_type_is_unpriced(self):
        table = _table()
        assert calculate_price(table, RouteType.ROUNDTRIP, 2) is None
        assert get_price_breakdown(table, RouteType.ROUNDTRIP, 2) is None

    def test_route_type_does_not_fall_back(self):
        # "SINGLE" is not "single"
        assert calculate_price(_table(), "SINGLE", 2) is None

    def test_gap_between_bands_yields_none(self):
        table = _table([
            {
                "route_type": "single",
                "passenger_ranges": [
                    {"min_passengers": 1, "max_passengers": 3, "price": 100},
                    {"min_passengers": 8, "max_passengers": 999, "price": 300},
                ],
            }
        ])
        assert calculate_price(table, "single", 5) is None
        assert calculate_price(table, "single", 8) == 300

    def test_overlapping_bands_first_wins(self):
        table = _table([
            {
                "routeType": "single",
                "passengerRanges": [
                    {"minPassengers": 1, "maxPassengers": 5, "price": 90},
                    {"minPassengers": 3, "maxPassengers": 8, "price": 140},
                ],
            }
        ])
        assert calculate_price(table, "single", 4) == 90
        assert calculate_price(table, "single", 6) == 140


@pytest.mark.unit
class TestSurcharges:

    def test_waiting_time_breakdown(self):
        breakdown = get_price_breakdown(_table(), "single", 2, waiting_time_hours=3)
        assert breakdown == PriceBreakdown(
            base_price=100, waiting_time=30, extra_passengers=0, total=130
        )

    def test_breakdown_components_sum_to_total(self):
        for count, hours in [(1, 0), (2, 1.5), (5, 4), (7, 0.25)]:
            breakdown = get_price_breakdown(_table(), "single", count, hours)
            assert breakdown.total == pytest.approx(
                breakdown.base_price + breakdown.waiting_time + breakdown.extra_passengers
            )
            assert calculate_price(_table(), "single", count, hours) == breakdown.total

    def test_no_waiting_surcharge_without_rate(self):
        table = _table(waiting_time_rate=None)
        breakdown = get_price_breakdown(table, "single", 2, waiting_time_hours=3)
        assert breakdown.waiting_time == 0
        assert breakdown.total == 100

    def test_zero_waiting_time_adds_nothing(self):
        assert calculate_price(_table(), "single", 2, 0) == 100

    def test_extra_passengers_above_supplied_band(self):
        band = PassengerPriceRange(min_passengers=1, max_passengers=3, price=100)
        breakdown = apply_surcharges(_table(), band, passenger_count=5, waiting_time_hours=1)
        assert breakdown.extra_passengers == 40
        assert breakdown.waiting_time == 10
        assert breakdown.total == 150

    def test_matched_band_never_charges_extra_passengers(self):
        breakdown = get_price_breakdown(_table(), "single", 7)
        assert breakdown.extra_passengers == 0


@pytest.mark.unit
class TestPriceBreakdown:

    def test_legs_add_up(self):
        first = PriceBreakdown(base_price=180, waiting_time=5, total=185)
        second = PriceBreakdown(base_price=200, waiting_time=5, extra_passengers=0, total=205)
        combined = first + second
        assert combined.to_dict() == {
            "base_price": 380, "waiting_time": 10, "extra_passengers": 0, "total": 390,
        }
