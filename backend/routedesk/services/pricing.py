"""Passenger-band pricing for agency routes.

A route's price matrix (``PricingTable``) holds one ``RoutePricing`` per route
type; each carries ordered passenger bands. Quoting a price:

    1. pick the RoutePricing for the requested route type (no fallback)
    2. pick the FIRST band with min_passengers <= count <= max_passengers
    3. base price = band price
    4. + waiting_time_hours * waiting_time_rate   (hours > 0 and rate set)
    5. + (count - band max) * extra_passenger_rate (count above the band)

Bands are not required to be contiguous or disjoint: a gap yields None and
overlapping bands resolve to whichever comes first. Step 5 can only fire when
the caller hands ``apply_surcharges`` a band it picked itself.

Amounts are plain floats in the table's currency; nothing is rounded here.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable

from routedesk.models.agency_route import RouteType


@dataclass(frozen=True)
class PassengerPriceRange:
    min_passengers: int
    max_passengers: int
    price: float
    description: str | None = None

    def contains(self, passenger_count: int) -> bool:
        return self.min_passengers <= passenger_count <= self.max_passengers

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PassengerPriceRange:
        return cls(
            min_passengers=int(_pick(data, "min_passengers", "minPassengers")),
            max_passengers=int(_pick(data, "max_passengers", "maxPassengers")),
            price=float(_pick(data, "price")),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class RoutePricing:
    route_type: str
    passenger_ranges: tuple[PassengerPriceRange, ...]

    def match(self, passenger_count: int) -> PassengerPriceRange | None:
        """First band containing ``passenger_count``, or None."""
        for band in self.passenger_ranges:
            if band.contains(passenger_count):
                return band
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RoutePricing:
        ranges = _pick(data, "passenger_ranges", "passengerRanges") or []
        return cls(
            route_type=_route_type_value(_pick(data, "route_type", "routeType")),
            passenger_ranges=tuple(PassengerPriceRange.from_dict(r) for r in ranges),
        )


@dataclass(frozen=True)
class PricingTable:
    pricing: tuple[RoutePricing, ...]
    waiting_time_rate: float | None = None
    extra_passenger_rate: float | None = None
    currency: str = "USD"

    def for_route_type(self, route_type: RouteType | str) -> RoutePricing | None:
        wanted = _route_type_value(route_type)
        for entry in self.pricing:
            if entry.route_type == wanted:
                return entry
        return None

    @classmethod
    def from_route(cls, route: Any) -> PricingTable:
        """Build from an AgencyRoute row (pricing stored as JSON)."""
        return cls(
            pricing=tuple(RoutePricing.from_dict(p) for p in (route.pricing or [])),
            waiting_time_rate=route.waiting_time_rate,
            extra_passenger_rate=route.extra_passenger_rate,
            currency=route.currency or "USD",
        )

    @classmethod
    def from_dicts(
        cls,
        pricing: Iterable[dict[str, Any]],
        waiting_time_rate: float | None = None,
        extra_passenger_rate: float | None = None,
        currency: str = "USD",
    ) -> PricingTable:
        return cls(
            pricing=tuple(RoutePricing.from_dict(p) for p in pricing),
            waiting_time_rate=waiting_time_rate,
            extra_passenger_rate=extra_passenger_rate,
            currency=currency,
        )


@dataclass
class PriceBreakdown:
    base_price: float
    waiting_time: float = 0
    extra_passengers: float = 0
    total: float = 0

    def __add__(self, other: PriceBreakdown) -> PriceBreakdown:
        return PriceBreakdown(
            base_price=self.base_price + other.base_price,
            waiting_time=self.waiting_time + other.waiting_time,
            extra_passengers=self.extra_passengers + other.extra_passengers,
            total=self.total + other.total,
        )

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def _pick(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _route_type_value(route_type: RouteType | str | None) -> str:
    if isinstance(route_type, RouteType):
        return route_type.value
    return str(route_type or "")


# ── Calculator ──────────────────────────────────────────────


def apply_surcharges(
    table: PricingTable,
    band: PassengerPriceRange,
    passenger_count: int,
    waiting_time_hours: float = 0,
) -> PriceBreakdown:
    """Price ``passenger_count`` against an already chosen band."""
    breakdown = PriceBreakdown(base_price=band.price, total=band.price)

    if waiting_time_hours > 0 and table.waiting_time_rate:
        breakdown.waiting_time = waiting_time_hours * table.waiting_time_rate
        breakdown.total += breakdown.waiting_time

    if passenger_count > band.max_passengers and table.extra_passenger_rate:
        extra = passenger_count - band.max_passengers
        breakdown.extra_passengers = extra * table.extra_passenger_rate
        breakdown.total += breakdown.extra_passengers

    return breakdown


def get_price_breakdown(
    table: PricingTable,
    route_type: RouteType | str,
    passenger_count: int,
    waiting_time_hours: float = 0,
) -> PriceBreakdown | None:
    """Itemized price, or None when no route type / band matches."""
    route_pricing = table.for_route_type(route_type)
    if route_pricing is None:
        return None

    band = route_pricing.match(passenger_count)
    if band is None:
        return None

    return apply_surcharges(table, band, passenger_count, waiting_time_hours)


def calculate_price(
    table: PricingTable,
    route_type: RouteType | str,
    passenger_count: int,
    waiting_time_hours: float = 0,
) -> float | None:
    breakdown = get_price_breakdown(table, route_type, passenger_count, waiting_time_hours)
    if breakdown is None:
        return None
    return breakdown.total
