"""Pydantic schemas for shipping route import and listing."""

from datetime import datetime
from typing import Any

from pydantic import Field

from routedesk.schemas.common import CamelModel


class ImportRequest(CamelModel):
    # Left untyped so a malformed list is answered with the import's own 400
    routes: Any = None
    overwrite_duplicates: bool = False


class ImportSummary(CamelModel):
    success: int
    duplicates: int
    errors: int
    errors_list: list[str] = Field(default_factory=list)
    created: int = 0
    updated: int = 0


class ImportResponse(CamelModel):
    message: str
    data: ImportSummary


class ClearResponse(CamelModel):
    message: str
    deleted: int


class ShippingRouteOut(CamelModel):
    id: str
    name: str
    origin: str
    destination: str
    container_type: str
    route_type: str
    status: str
    client: str
    route_area: str
    price: float
    created_at: datetime
    updated_at: datetime


class PTYSSRouteOut(ShippingRouteOut):
    pass


class TruckingRouteOut(ShippingRouteOut):
    container_size: str = ""
