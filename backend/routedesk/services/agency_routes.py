"""Agency route catalog: create / update rules and price quotes.

Locations and site types are stored upper-cased. When a site type is given it
takes precedence over the free-text location for both the stored location and
the derived route name ("PICKUP / DROPOFF").
"""

import logging
from typing import Any

from routedesk.middleware.exceptions import (
    BusinessLogicError,
    ConflictError,
    ResourceNotFoundError,
)
from routedesk.models.agency_route import AgencyRoute, RouteType
from routedesk.repositories.route_store import InsertStatus, RouteStore
from routedesk.services.pricing import (
    PriceBreakdown,
    PricingTable,
    get_price_breakdown,
)

logger = logging.getLogger(__name__)


def agency_route_name(pickup: str, dropoff: str) -> str:
    return f"{pickup.strip().upper()} / {dropoff.strip().upper()}"


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip().upper()
    return value or None


def validate_pricing(pricing: list[dict[str, Any]]) -> None:
    if not pricing:
        raise BusinessLogicError(
            "At least one pricing configuration is required", "PRICING_REQUIRED"
        )
    for entry in pricing:
        route_type = entry["route_type"]

        ranges = entry.get("passenger_ranges") or []
        if not ranges:
            raise BusinessLogicError(
                f"Route type '{route_type}' needs at least one passenger range",
                "INVALID_PRICING",
            )
        for band in ranges:
            if band["min_passengers"] > band["max_passengers"]:
                raise BusinessLogicError(
                    f"Invalid passenger range {band['min_passengers']}-"
                    f"{band['max_passengers']} for route type '{route_type}'",
                    "INVALID_PRICING",
                )


async def create_agency_route(store: RouteStore, values: dict[str, Any]) -> AgencyRoute:
    """Validate and persist a new agency route.

    ``values`` uses model attribute names; pricing is a list of plain dicts.
    """
    pickup_site_type = _clean(values.get("pickup_site_type"))
    dropoff_site_type = _clean(values.get("dropoff_site_type"))
    pickup = pickup_site_type or _clean(values.get("pickup_location"))
    dropoff = dropoff_site_type or _clean(values.get("dropoff_location"))

    if not pickup or not dropoff:
        raise BusinessLogicError(
            "Pickup and dropoff locations (or site types) are required", "LOCATIONS_REQUIRED"
        )
    if pickup == dropoff:
        raise BusinessLogicError(
            "Pickup and dropoff locations cannot be the same", "SAME_LOCATIONS"
        )
    validate_pricing(values.get("pricing") or [])

    existing = await store.find_agency_route_by_locations(pickup, dropoff, active_only=False)
    if existing is not None:
        raise ConflictError("A route with these locations/site types already exists")

    record = {
        **values,
        "name": agency_route_name(pickup, dropoff),
        "pickup_location": pickup,
        "dropoff_location": dropoff,
        "pickup_site_type": pickup_site_type,
        "dropoff_site_type": dropoff_site_type,
        "is_active": True,
    }
    outcome = await store.create_agency_route(record)
    if outcome.status is InsertStatus.CONFLICT:
        raise ConflictError("A route with these locations/site types already exists")
    if outcome.status is InsertStatus.ERROR:
        raise BusinessLogicError(f"Could not create route: {outcome.detail}", "CREATE_FAILED")

    logger.info("Created agency route %s (%s)", outcome.record_id, record["name"])
    return await store.get_agency_route(outcome.record_id)


async def update_agency_route(
    store: RouteStore, route_id: str, changes: dict[str, Any]
) -> AgencyRoute:
    """Apply a partial update; renaming follows a location change."""
    route = await store.get_agency_route(route_id)
    if route is None:
        raise ResourceNotFoundError("Agency route", route_id)

    changes = {k: v for k, v in changes.items() if v is not None and k != "name"}

    if "pickup_location" in changes or "dropoff_location" in changes:
        pickup = _clean(changes.get("pickup_location")) or route.pickup_location
        dropoff = _clean(changes.get("dropoff_location")) or route.dropoff_location
        if pickup == dropoff:
            raise BusinessLogicError(
                "Pickup and dropoff locations cannot be the same", "SAME_LOCATIONS"
            )
        changes["pickup_location"] = pickup
        changes["dropoff_location"] = dropoff
        changes["name"] = agency_route_name(pickup, dropoff)

    for key in ("pickup_site_type", "dropoff_site_type"):
        if key in changes:
            changes[key] = _clean(changes[key])

    if "pricing" in changes:
        validate_pricing(changes["pricing"])

    updated = await store.update_agency_route(route_id, changes)
    if updated is None:
        raise ResourceNotFoundError("Agency route", route_id)
    logger.info("Updated agency route %s (%s)", route_id, ", ".join(sorted(changes)))
    return updated


async def set_agency_route_active(store: RouteStore, route_id: str, active: bool) -> AgencyRoute:
    updated = await store.update_agency_route(route_id, {"is_active": active})
    if updated is None:
        raise ResourceNotFoundError("Agency route", route_id)
    return updated


async def delete_agency_route(store: RouteStore, route_id: str) -> None:
    if not await store.delete_agency_route(route_id):
        raise ResourceNotFoundError("Agency route", route_id)


# ── Quoting ─────────────────────────────────────────────────


async def quote_price(
    store: RouteStore,
    pickup: str,
    dropoff: str,
    route_type: RouteType | str,
    passenger_count: int,
    waiting_time_hours: float = 0,
) -> PriceBreakdown | None:
    """Price breakdown for the active route between two points, or None.

    None covers both "no active route" and "route type / passenger count not
    priced"; use ``build_quote`` when the caller needs to tell them apart.
    """
    route = await store.find_agency_route_by_locations(pickup, dropoff, active_only=True)
    if route is None:
        return None
    return get_price_breakdown(
        PricingTable.from_route(route), route_type, passenger_count, waiting_time_hours
    )


def _route_summary(route: AgencyRoute) -> dict[str, Any]:
    return {
        "id": route.id,
        "name": route.name,
        "pickup_location": route.pickup_location or route.pickup_site_type,
        "dropoff_location": route.dropoff_location or route.dropoff_site_type,
        "currency": route.currency,
    }


async def _priced_leg(
    store: RouteStore,
    pickup: str,
    dropoff: str,
    route_type: RouteType,
    passenger_count: int,
    waiting_time_hours: float,
    leg: str,
) -> tuple[AgencyRoute, PriceBreakdown]:
    route = await store.find_agency_route_by_locations(pickup, dropoff, active_only=True)
    if route is None:
        raise ResourceNotFoundError(f"{leg} route", f"{pickup} -> {dropoff}")

    breakdown = get_price_breakdown(
        PricingTable.from_route(route), route_type, passenger_count, waiting_time_hours
    )
    if breakdown is None:
        raise BusinessLogicError(
            f"Could not calculate {route_type.value} price for {leg.lower()} route. "
            "Check passenger count and pricing configuration.",
            "PRICE_NOT_AVAILABLE",
        )
    return route, breakdown


async def build_quote(
    store: RouteStore,
    pickup: str,
    dropoff: str,
    route_type: RouteType,
    passenger_count: int,
    waiting_time_hours: float = 0,
    waiting_time_minutes: float = 0,
    return_dropoff: str | None = None,
) -> dict[str, Any]:
    """Full quote for the HTTP endpoint.

    ``waiting_time_minutes`` wins over ``waiting_time_hours`` when positive.
    A round trip with a return leg prices both legs with roundtrip pricing and
    splits the waiting time evenly between them.
    """
    hours = waiting_time_minutes / 60 if waiting_time_minutes > 0 else waiting_time_hours
    is_round_trip = route_type is RouteType.ROUNDTRIP

    if is_round_trip and return_dropoff:
        first, first_breakdown = await _priced_leg(
            store, pickup, dropoff, route_type, passenger_count, hours / 2, "First"
        )
        second, second_breakdown = await _priced_leg(
            store, dropoff, return_dropoff, route_type, passenger_count, hours / 2, "Return"
        )
        routes = [first, second]
        breakdown = first_breakdown + second_breakdown
    else:
        first, breakdown = await _priced_leg(
            store, pickup, dropoff, route_type, passenger_count, hours, "First"
        )
        routes = [first]

    return {
        "found": True,
        "price": breakdown.total,
        "breakdown": breakdown.to_dict(),
        "routes": [_route_summary(r) for r in routes],
        "calculation": {
            "route_type": route_type.value,
            "passenger_count": passenger_count,
            "waiting_time_hours": hours,
            "waiting_time_minutes": waiting_time_minutes,
            "is_round_trip": is_round_trip,
        },
    }
