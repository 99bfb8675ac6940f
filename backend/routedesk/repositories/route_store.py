"""RouteStore, the single data-access object for every route table.

Built once at start-up (FastAPI lifespan / CLI) around a session factory and
handed to the import engine and the pricing endpoints. Each method opens its
own short-lived session, so concurrent row tasks never share one.

``insert`` reports unique-constraint collisions as ``InsertStatus.CONFLICT``
instead of raising: a collision is an expected outcome when two rows of the
same import batch race for one identity key.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from routedesk.database import Base
from routedesk.models.agency_route import AgencyRoute

logger = logging.getLogger(__name__)


class InsertStatus(str, enum.Enum):
    CREATED = "created"
    CONFLICT = "conflict"
    ERROR = "error"


@dataclass
class InsertOutcome:
    status: InsertStatus
    record_id: str | None = None
    detail: str | None = None


def is_unique_violation(exc: IntegrityError) -> bool:
    """True for unique/primary-key violations (Postgres 23505, SQLite UNIQUE)."""
    orig = getattr(exc, "orig", None)
    if getattr(orig, "sqlstate", None) == "23505" or getattr(orig, "pgcode", None) == "23505":
        return True
    error_msg = str(orig if orig is not None else exc).lower()
    return "unique" in error_msg or "duplicate key" in error_msg


class RouteStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    # ── Generic route operations ─────────────────────────────

    async def find_one(self, model: type[Base], filters: dict[str, Any]) -> Any | None:
        async with self._session_factory() as session:
            result = await session.execute(select(model).filter_by(**filters).limit(1))
            return result.scalars().first()

    async def insert(self, model: type[Base], values: dict[str, Any]) -> InsertOutcome:
        record = model(**values)
        async with self._session_factory() as session:
            try:
                async with session.begin():
                    session.add(record)
            except IntegrityError as exc:
                detail = str(exc.orig) if exc.orig is not None else str(exc)
                if is_unique_violation(exc):
                    return InsertOutcome(InsertStatus.CONFLICT, detail=detail)
                return InsertOutcome(InsertStatus.ERROR, detail=detail)
        return InsertOutcome(InsertStatus.CREATED, record_id=record.id)

    async def update(self, model: type[Base], record_id: str, values: dict[str, Any]) -> bool:
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    update(model).where(model.id == record_id).values(**values)
                )
        return result.rowcount > 0

    async def list_routes(
        self, model: type[Base], limit: int = 50, offset: int = 0
    ) -> tuple[list[Any], int]:
        async with self._session_factory() as session:
            total = (await session.execute(select(func.count()).select_from(model))).scalar_one()
            result = await session.execute(
                select(model).order_by(model.name, model.created_at).limit(limit).offset(offset)
            )
            return list(result.scalars().all()), total

    async def all_by_age(self, model: type[Base]) -> list[Any]:
        """Every row, oldest first."""
        async with self._session_factory() as session:
            result = await session.execute(select(model).order_by(model.created_at, model.id))
            return list(result.scalars().all())

    async def delete_ids(self, model: type[Base], ids: list[str]) -> int:
        if not ids:
            return 0
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(delete(model).where(model.id.in_(ids)))
        return result.rowcount

    async def delete_all(self, model: type[Base]) -> int:
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(delete(model))
        return result.rowcount

    # ── Agency routes ────────────────────────────────────────

    async def find_agency_route_by_locations(
        self, pickup: str, dropoff: str, active_only: bool = True
    ) -> AgencyRoute | None:
        """Match on locations or on site types (either pair)."""
        pickup, dropoff = pickup.strip().upper(), dropoff.strip().upper()
        query = select(AgencyRoute).where(
            or_(
                (AgencyRoute.pickup_location == pickup) & (AgencyRoute.dropoff_location == dropoff),
                (AgencyRoute.pickup_site_type == pickup) & (AgencyRoute.dropoff_site_type == dropoff),
            )
        )
        if active_only:
            query = query.where(AgencyRoute.is_active == True)  # noqa: E712
        async with self._session_factory() as session:
            result = await session.execute(query.limit(1))
            return result.scalars().first()

    async def get_agency_route(self, route_id: str) -> AgencyRoute | None:
        async with self._session_factory() as session:
            return await session.get(AgencyRoute, route_id)

    async def list_agency_routes(
        self,
        is_active: bool | None = None,
        pickup_location: str | None = None,
        dropoff_location: str | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[AgencyRoute], int]:
        query = select(AgencyRoute)
        if is_active is not None:
            query = query.where(AgencyRoute.is_active == is_active)
        if pickup_location:
            query = query.where(AgencyRoute.pickup_location == pickup_location.upper())
        if dropoff_location:
            query = query.where(AgencyRoute.dropoff_location == dropoff_location.upper())
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    AgencyRoute.name.ilike(pattern),
                    AgencyRoute.pickup_location.ilike(pattern),
                    AgencyRoute.dropoff_location.ilike(pattern),
                    AgencyRoute.description.ilike(pattern),
                )
            )

        async with self._session_factory() as session:
            total = (
                await session.execute(select(func.count()).select_from(query.subquery()))
            ).scalar_one()
            result = await session.execute(
                query.order_by(AgencyRoute.name).limit(limit).offset(offset)
            )
            return list(result.scalars().all()), total

    async def create_agency_route(self, values: dict[str, Any]) -> InsertOutcome:
        return await self.insert(AgencyRoute, values)

    async def update_agency_route(
        self, route_id: str, values: dict[str, Any]
    ) -> AgencyRoute | None:
        async with self._session_factory() as session:
            async with session.begin():
                route = await session.get(AgencyRoute, route_id)
                if route is None:
                    return None
                for key, value in values.items():
                    setattr(route, key, value)
            return route

    async def delete_agency_route(self, route_id: str) -> bool:
        return await self.delete_ids(AgencyRoute, [route_id]) > 0


def get_route_store(request: Request) -> RouteStore:
    """FastAPI dependency: the store built by the application lifespan."""
    return request.app.state.route_store
