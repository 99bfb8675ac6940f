"""Agency route catalog and price quotes.

Endpoints:
    GET    /api/agency/routes/                    List routes (filters + paging)
    POST   /api/agency/routes/                    Create route
    GET    /api/agency/routes/lookup              Find active route by pickup/dropoff
    POST   /api/agency/routes/calculate-price     Price quote (one way or round trip)
    GET    /api/agency/routes/{id}                Get route
    PUT    /api/agency/routes/{id}                Update route
    PUT    /api/agency/routes/{id}/deactivate     Soft delete
    PUT    /api/agency/routes/{id}/reactivate     Undo soft delete
    DELETE /api/agency/routes/{id}                Hard delete
"""

from fastapi import APIRouter, Depends, Query

from routedesk.middleware.exceptions import ResourceNotFoundError
from routedesk.repositories.route_store import RouteStore, get_route_store
from routedesk.schemas.agency_route import (
    AgencyRouteCreate,
    AgencyRouteOut,
    AgencyRouteUpdate,
    PriceQuoteOut,
    PriceQuoteRequest,
)
from routedesk.schemas.common import PaginatedResponse
from routedesk.services import agency_routes as agency_service
from routedesk.utils.cache import cached, invalidate_cache

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[AgencyRouteOut])
@cached(prefix="agency_routes")
async def list_agency_routes(
    is_active: bool | None = None,
    pickup_location: str | None = None,
    dropoff_location: str | None = None,
    search: str | None = None,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    store: RouteStore = Depends(get_route_store),
):
    """List agency routes, optionally filtered by state, locations or free text."""
    items, total = await store.list_agency_routes(
        is_active=is_active,
        pickup_location=pickup_location,
        dropoff_location=dropoff_location,
        search=search,
        limit=limit,
        offset=offset,
    )
    return PaginatedResponse[AgencyRouteOut](
        items=[AgencyRouteOut.model_validate(r) for r in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post("/", response_model=AgencyRouteOut, status_code=201)
async def create_agency_route(
    body: AgencyRouteCreate,
    store: RouteStore = Depends(get_route_store),
):
    route = await agency_service.create_agency_route(store, body.model_dump(mode="json"))
    await invalidate_cache("agency_routes:*")
    return AgencyRouteOut.model_validate(route)


@router.get("/lookup", response_model=AgencyRouteOut)
async def lookup_agency_route(
    pickup_location: str = Query(..., min_length=1),
    dropoff_location: str = Query(..., min_length=1),
    store: RouteStore = Depends(get_route_store),
):
    """Active route matching the pair as locations or as site types."""
    route = await store.find_agency_route_by_locations(pickup_location, dropoff_location)
    if route is None:
        raise ResourceNotFoundError("Agency route", f"{pickup_location} -> {dropoff_location}")
    return AgencyRouteOut.model_validate(route)


@router.post("/calculate-price", response_model=PriceQuoteOut)
async def calculate_price(
    body: PriceQuoteRequest,
    store: RouteStore = Depends(get_route_store),
):
    return await agency_service.build_quote(
        store,
        pickup=body.pickup_location,
        dropoff=body.dropoff_location,
        route_type=body.route_type,
        passenger_count=body.passenger_count,
        waiting_time_hours=body.waiting_time_hours,
        waiting_time_minutes=body.waiting_time,
        return_dropoff=body.return_dropoff_location,
    )


@router.get("/{route_id}", response_model=AgencyRouteOut)
async def get_agency_route(
    route_id: str,
    store: RouteStore = Depends(get_route_store),
):
    route = await store.get_agency_route(route_id)
    if route is None:
        raise ResourceNotFoundError("Agency route", route_id)
    return AgencyRouteOut.model_validate(route)


@router.put("/{route_id}", response_model=AgencyRouteOut)
async def update_agency_route(
    route_id: str,
    body: AgencyRouteUpdate,
    store: RouteStore = Depends(get_route_store),
):
    changes = body.model_dump(mode="json", exclude_unset=True)
    route = await agency_service.update_agency_route(store, route_id, changes)
    await invalidate_cache("agency_routes:*")
    return AgencyRouteOut.model_validate(route)


@router.put("/{route_id}/deactivate", response_model=AgencyRouteOut)
async def deactivate_agency_route(
    route_id: str,
    store: RouteStore = Depends(get_route_store),
):
    route = await agency_service.set_agency_route_active(store, route_id, False)
    await invalidate_cache("agency_routes:*")
    return AgencyRouteOut.model_validate(route)


@router.put("/{route_id}/reactivate", response_model=AgencyRouteOut)
async def reactivate_agency_route(
    route_id: str,
    store: RouteStore = Depends(get_route_store),
):
    route = await agency_service.set_agency_route_active(store, route_id, True)
    await invalidate_cache("agency_routes:*")
    return AgencyRouteOut.model_validate(route)


@router.delete("/{route_id}", status_code=204)
async def delete_agency_route(
    route_id: str,
    store: RouteStore = Depends(get_route_store),
):
    await agency_service.delete_agency_route(store, route_id)
    await invalidate_cache("agency_routes:*")
