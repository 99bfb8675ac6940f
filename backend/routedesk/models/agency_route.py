"""Agency route — a crew transport leg between two locations or site types.

Prices live in ``pricing``: a JSON list with one entry per route type, each
holding ordered passenger-count bands:

    [{"route_type": "single",
      "passenger_ranges": [{"min_passengers": 1, "max_passengers": 3, "price": 100.0},
                           {"min_passengers": 4, "max_passengers": 999, "price": 150.0}]}]

Bands are not checked for gaps or overlap; see services/pricing.py.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from routedesk.database import Base


class RouteType(str, enum.Enum):
    SINGLE = "single"
    ROUNDTRIP = "roundtrip"
    INTERNAL = "internal"
    BAGS_CLAIM = "bags_claim"
    DOCUMENTATION = "documentation"
    NO_SHOW = "no_show"


class AgencyRoute(Base):
    __tablename__ = "agency_routes"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    # "PICKUP / DROPOFF"
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    pickup_location: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    dropoff_location: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    pickup_site_type: Mapped[str | None] = mapped_column(String(255), index=True)
    dropoff_site_type: Mapped[str | None] = mapped_column(String(255), index=True)

    pricing: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    waiting_time_rate: Mapped[float | None] = mapped_column(Float, default=10)
    extra_passenger_rate: Mapped[float | None] = mapped_column(Float, default=20)

    description: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    distance: Mapped[float | None] = mapped_column(Float)  # km
    estimated_duration: Mapped[int | None] = mapped_column(Integer)  # minutes

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
