"""Columns shared by the container shipping route families (trucking, PTYSS).

Every identity column is NOT NULL with an empty-string default so the compound
unique constraint on each concrete table also covers rows without an optional
value (SQL treats NULLs as distinct in unique indexes).
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, String
from sqlalchemy.orm import Mapped, mapped_column


class RouteStatus(str, enum.Enum):
    FULL = "FULL"
    EMPTY = "EMPTY"


class ShippingRouteMixin:
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    # "{origin}/{destination}", derived on write
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    origin: Mapped[str] = mapped_column(String(100), nullable=False)
    destination: Mapped[str] = mapped_column(String(100), nullable=False)
    container_type: Mapped[str] = mapped_column(String(50), nullable=False)
    # Kept in the case it was supplied with
    route_type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=RouteStatus.FULL.value)
    client: Mapped[str] = mapped_column(String(255), nullable=False)
    route_area: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
