"""RouteDesk API: shipping route import and agency route pricing."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routedesk.config import settings
from routedesk.database import async_session, engine
from routedesk.middleware.exceptions import register_exception_handlers
from routedesk.repositories.route_store import RouteStore
from routedesk.routers import agency_routes, health, shipping_routes
from routedesk.utils.cache import close_redis

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("routedesk")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared RouteStore on startup; release pools on shutdown."""
    app.state.engine = engine
    app.state.route_store = RouteStore(async_session)
    logger.info("RouteDesk started (%s)", settings.environment)
    yield
    await close_redis()
    await engine.dispose()
    logger.info("RouteDesk stopped")


app = FastAPI(
    title="RouteDesk",
    description="Route pricing and bulk route import service",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
app.include_router(health.router)
app.include_router(
    shipping_routes.trucking_router, prefix="/api/trucking-routes", tags=["trucking-routes"]
)
app.include_router(
    shipping_routes.ptyss_router, prefix="/api/ptyss-routes", tags=["ptyss-routes"]
)
app.include_router(agency_routes.router, prefix="/api/agency/routes", tags=["agency-routes"])
