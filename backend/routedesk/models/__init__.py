"""Aggregate model imports for Alembic auto-detection."""

from routedesk.models.agency_route import AgencyRoute, RouteType  # noqa: F401
from routedesk.models.ptyss_route import PTYSSRoute  # noqa: F401
from routedesk.models.shipping_route import RouteStatus  # noqa: F401
from routedesk.models.trucking_route import TruckingRoute  # noqa: F401
