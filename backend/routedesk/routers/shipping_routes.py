"""Shipping route collections (trucking, PTYSS): bulk import, list, clear.

One router per family, mounted by main.py:

    POST   /api/trucking-routes/import    Bulk import trucking rows
    GET    /api/trucking-routes/          List trucking routes (paginated)
    DELETE /api/trucking-routes/          Clear the trucking collection
    POST   /api/ptyss-routes/import       Bulk import PTYSS rows
    GET    /api/ptyss-routes/             List PTYSS routes (paginated)
    DELETE /api/ptyss-routes/             Clear the PTYSS collection

Row-level failures never fail the request: they are counted in the import
summary and the first ``settings.import_error_report_limit`` messages are
returned in ``errorsList``.
"""

import logging

from fastapi import APIRouter, Depends, Query

from routedesk.config import settings
from routedesk.repositories.route_store import RouteStore, get_route_store
from routedesk.schemas.common import PaginatedResponse
from routedesk.schemas.shipping_route import (
    ClearResponse,
    ImportRequest,
    ImportResponse,
    ImportSummary,
    PTYSSRouteOut,
    TruckingRouteOut,
)
from routedesk.services.route_cleanup import clear_routes
from routedesk.services.route_identity import PTYSS, TRUCKING, RouteFamily
from routedesk.services.route_import import run_import
from routedesk.utils.cache import invalidate_cache

logger = logging.getLogger(__name__)


def build_router(family: RouteFamily, route_out: type) -> APIRouter:
    router = APIRouter()
    plural = f"{family.label}s"

    @router.post("/import", response_model=ImportResponse)
    async def import_routes(
        body: ImportRequest,
        store: RouteStore = Depends(get_route_store),
    ):
        result = await run_import(
            store,
            family,
            body.routes,
            overwrite_duplicates=body.overwrite_duplicates,
            timeout=settings.import_timeout_seconds,
        )
        if result.success:
            await invalidate_cache("agency_routes:*")

        logger.info(
            "Import of %s finished: %d created, %d updated, %d duplicates, %d errors",
            plural, result.created, result.updated, result.duplicates, result.errors,
        )
        return ImportResponse(
            message=(
                f"Import completed: {result.success} {plural} imported, "
                f"{result.duplicates} duplicates, {result.errors} errors"
            ),
            data=ImportSummary(
                success=result.success,
                duplicates=result.duplicates,
                errors=result.errors,
                errors_list=result.reported_errors(),
                created=result.created,
                updated=result.updated,
            ),
        )

    @router.get("/", response_model=PaginatedResponse[route_out])
    async def list_routes(
        limit: int = Query(50, ge=1, le=500),
        offset: int = Query(0, ge=0),
        store: RouteStore = Depends(get_route_store),
    ):
        items, total = await store.list_routes(family.model, limit=limit, offset=offset)
        return PaginatedResponse[route_out](
            items=[route_out.model_validate(r) for r in items],
            total=total,
            limit=limit,
            offset=offset,
        )

    @router.delete("/", response_model=ClearResponse)
    async def clear_collection(store: RouteStore = Depends(get_route_store)):
        deleted = await clear_routes(store, family)
        await invalidate_cache("agency_routes:*")
        return ClearResponse(message=f"Deleted {deleted} {plural}", deleted=deleted)

    return router


trucking_router = build_router(TRUCKING, TruckingRouteOut)
ptyss_router = build_router(PTYSS, PTYSSRouteOut)
