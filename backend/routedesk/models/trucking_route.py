"""Trucking route — an inland container move priced per client and area."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from routedesk.database import Base
from routedesk.models.shipping_route import ShippingRouteMixin


class TruckingRoute(ShippingRouteMixin, Base):
    __tablename__ = "trucking_routes"
    __table_args__ = (
        UniqueConstraint(
            "name", "origin", "destination", "container_type", "route_type",
            "status", "client", "route_area", "container_size",
            name="uq_trucking_routes_identity",
        ),
    )

    container_size: Mapped[str] = mapped_column(String(20), nullable=False, default="")
