"""Pydantic schemas for agency route CRUD and price quotes."""

from datetime import datetime

from pydantic import Field

from routedesk.models.agency_route import RouteType
from routedesk.schemas.common import CamelModel


class PassengerPriceRange(CamelModel):
    min_passengers: int = Field(..., ge=1)
    max_passengers: int = Field(..., ge=1)
    price: float = Field(..., ge=0)
    description: str | None = None


class RoutePricing(CamelModel):
    route_type: RouteType
    passenger_ranges: list[PassengerPriceRange]


class AgencyRouteCreate(CamelModel):
    pickup_location: str | None = Field(None, max_length=255)
    dropoff_location: str | None = Field(None, max_length=255)
    pickup_site_type: str | None = Field(None, max_length=255)
    dropoff_site_type: str | None = Field(None, max_length=255)
    pricing: list[RoutePricing]
    currency: str = Field("USD", max_length=3)
    waiting_time_rate: float | None = Field(10, ge=0)
    extra_passenger_rate: float | None = Field(20, ge=0)
    description: str | None = None
    notes: str | None = None
    distance: float | None = Field(None, ge=0)
    estimated_duration: int | None = Field(None, ge=0)


class AgencyRouteUpdate(CamelModel):
    pickup_location: str | None = Field(None, max_length=255)
    dropoff_location: str | None = Field(None, max_length=255)
    pickup_site_type: str | None = Field(None, max_length=255)
    dropoff_site_type: str | None = Field(None, max_length=255)
    pricing: list[RoutePricing] | None = None
    currency: str | None = Field(None, max_length=3)
    waiting_time_rate: float | None = Field(None, ge=0)
    extra_passenger_rate: float | None = Field(None, ge=0)
    description: str | None = None
    notes: str | None = None
    distance: float | None = Field(None, ge=0)
    estimated_duration: int | None = Field(None, ge=0)
    is_active: bool | None = None


class AgencyRouteOut(CamelModel):
    id: str
    name: str
    pickup_location: str
    dropoff_location: str
    pickup_site_type: str | None
    dropoff_site_type: str | None
    pricing: list[RoutePricing]
    currency: str
    waiting_time_rate: float | None
    extra_passenger_rate: float | None
    description: str | None
    notes: str | None
    distance: float | None
    estimated_duration: int | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ── Quotes ──────────────────────────────────────────────────


class PriceQuoteRequest(CamelModel):
    pickup_location: str = Field(..., min_length=1)
    dropoff_location: str = Field(..., min_length=1)
    return_dropoff_location: str | None = None
    route_type: RouteType
    passenger_count: int = Field(..., ge=1)
    waiting_time_hours: float = Field(0, ge=0)
    waiting_time: float = Field(0, ge=0)  # minutes


class PriceBreakdownOut(CamelModel):
    base_price: float
    waiting_time: float
    extra_passengers: float
    total: float


class QuotedRouteOut(CamelModel):
    id: str
    name: str
    pickup_location: str | None
    dropoff_location: str | None
    currency: str


class QuoteCalculationOut(CamelModel):
    route_type: RouteType
    passenger_count: int
    waiting_time_hours: float
    waiting_time_minutes: float
    is_round_trip: bool


class PriceQuoteOut(CamelModel):
    found: bool
    price: float
    breakdown: PriceBreakdownOut
    routes: list[QuotedRouteOut]
    calculation: QuoteCalculationOut
