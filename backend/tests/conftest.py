"""Pytest configuration and fixtures for RouteDesk tests.

Two storage backends are provided:

    memory_store  In-process double of RouteStore. ``find_one`` yields to the
                  event loop after reading, so sibling rows of one batch
                  interleave exactly like concurrent database sessions.
    sqlite_store  The real RouteStore on a temporary SQLite file (aiosqlite).
"""

import asyncio
import os
import uuid
from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Any, AsyncGenerator

# Must be set before routedesk.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("DEBUG", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from routedesk.database import Base, build_engine, build_session_factory
from routedesk.main import app
from routedesk.repositories.route_store import InsertOutcome, InsertStatus, RouteStore
from routedesk.services.route_identity import ROUTE_FAMILIES


# ── In-memory store ──────────────────────────────────────────────

class InMemoryRouteStore:
    """Just enough of RouteStore for the import engine and cleanup service."""

    def __init__(self):
        self.tables: dict[type, list[SimpleNamespace]] = {
            family.model: [] for family in ROUTE_FAMILIES.values()
        }
        self.unique_keys = {
            family.model: family.identity_fields for family in ROUTE_FAMILIES.values()
        }
        self.conflicts = 0
        self.find_delay = 0.0
        self.failing_names: set[str] = set()
        self._clock = datetime(2024, 1, 1)

    def _matches(self, row: SimpleNamespace, filters: dict[str, Any]) -> bool:
        return all(getattr(row, k) == v for k, v in filters.items())

    def seed(self, model: type, **values) -> SimpleNamespace:
        """Store a row directly, bypassing the unique check."""
        self._clock += timedelta(seconds=1)
        row = SimpleNamespace(
            id=str(uuid.uuid4()), created_at=self._clock, updated_at=self._clock, **values
        )
        self.tables[model].append(row)
        return row

    async def find_one(self, model: type, filters: dict[str, Any]):
        found = next((r for r in self.tables[model] if self._matches(r, filters)), None)
        await asyncio.sleep(self.find_delay)
        return found

    async def insert(self, model: type, values: dict[str, Any]) -> InsertOutcome:
        if values.get("name") in self.failing_names:
            return InsertOutcome(InsertStatus.ERROR, detail="connection reset by peer")
        key = {k: values.get(k) for k in self.unique_keys[model]}
        if any(self._matches(r, key) for r in self.tables[model]):
            self.conflicts += 1
            return InsertOutcome(InsertStatus.CONFLICT, detail="duplicate key value")
        row = self.seed(model, **values)
        return InsertOutcome(InsertStatus.CREATED, record_id=row.id)

    async def update(self, model: type, record_id: str, values: dict[str, Any]) -> bool:
        for row in self.tables[model]:
            if row.id == record_id:
                for k, v in values.items():
                    setattr(row, k, v)
                return True
        return False

    async def all_by_age(self, model: type) -> list:
        return sorted(self.tables[model], key=lambda r: (r.created_at, r.id))

    async def delete_ids(self, model: type, ids: list[str]) -> int:
        before = len(self.tables[model])
        self.tables[model] = [r for r in self.tables[model] if r.id not in set(ids)]
        return before - len(self.tables[model])

    async def delete_all(self, model: type) -> int:
        count = len(self.tables[model])
        self.tables[model] = []
        return count


@pytest.fixture
def memory_store() -> InMemoryRouteStore:
    return InMemoryRouteStore()


# ── SQLite store ─────────────────────────────────────────────────

@pytest_asyncio.fixture
async def sqlite_engine(tmp_path):
    """Fresh schema on a temporary SQLite file per test."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'routedesk.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def sqlite_store(sqlite_engine) -> RouteStore:
    return RouteStore(build_session_factory(sqlite_engine))


@pytest_asyncio.fixture
async def client(sqlite_engine, sqlite_store) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the SQLite-backed store."""
    app.state.engine = sqlite_engine
    app.state.route_store = sqlite_store

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# ── Sample payloads ──────────────────────────────────────────────

def trucking_row(**overrides) -> dict[str, Any]:
    row = {
        "origin": "balboa",
        "destination": "colon",
        "containerType": "dv",
        "routeType": "single",
        "status": "full",
        "client": "msc",
        "routeArea": "pacific",
        "containerSize": "40",
        "price": 250,
    }
    row.update(overrides)
    return row


def agency_route_payload(**overrides) -> dict[str, Any]:
    payload = {
        "pickupLocation": "Hotel Riu",
        "dropoffLocation": "Tocumen Airport",
        "pricing": [
            {
                "routeType": "single",
                "passengerRanges": [
                    {"minPassengers": 1, "maxPassengers": 3, "price": 100},
                    {"minPassengers": 4, "maxPassengers": 6, "price": 150},
                ],
            },
            {
                "routeType": "roundtrip",
                "passengerRanges": [
                    {"minPassengers": 1, "maxPassengers": 6, "price": 180},
                ],
            },
        ],
        "waitingTimeRate": 10,
        "extraPassengerRate": 20,
    }
    payload.update(overrides)
    return payload


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "api: HTTP API tests")
    config.addinivalue_line("markers", "integration: Tests against a real database")
