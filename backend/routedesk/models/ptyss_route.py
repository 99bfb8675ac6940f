"""PTYSS route — a port-to-yard shuttle move between two terminals."""

from sqlalchemy import UniqueConstraint

from routedesk.database import Base
from routedesk.models.shipping_route import ShippingRouteMixin


class PTYSSRoute(ShippingRouteMixin, Base):
    __tablename__ = "ptyss_routes"
    __table_args__ = (
        UniqueConstraint(
            "name", "origin", "destination", "container_type", "route_type",
            "status", "client", "route_area",
            name="uq_ptyss_routes_identity",
        ),
    )
