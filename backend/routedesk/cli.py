"""Management CLI for route maintenance.

Usage:
    python -m routedesk.cli create-tables                         # Create every route table
    python -m routedesk.cli import-routes <family> <file.json> [--overwrite]
    python -m routedesk.cli dedupe-routes <family> [--dry-run]    # Keep oldest per identity

<family> is one of: trucking, ptyss. The import file holds either a JSON list
of rows or an object with a "routes" list (the HTTP request body).
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

from routedesk.config import settings
from routedesk.database import Base, async_session, engine
from routedesk.middleware.exceptions import RouteDeskException
from routedesk.models import *  # noqa: F401,F403
from routedesk.repositories.route_store import RouteStore
from routedesk.services.route_cleanup import dedupe_routes
from routedesk.services.route_identity import get_family
from routedesk.services.route_import import run_import

USAGE = (
    "Usage: python -m routedesk.cli "
    "[create-tables | import-routes <family> <file.json> [--overwrite] | "
    "dedupe-routes <family> [--dry-run]]"
)


async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print(f"Created tables: {', '.join(sorted(Base.metadata.tables))}")


def load_rows(path: Path):
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        return payload.get("routes")
    return payload


async def import_routes(family_key: str, path: Path, overwrite: bool):
    family = get_family(family_key)
    rows = load_rows(path)
    result = await run_import(
        RouteStore(async_session),
        family,
        rows,
        overwrite_duplicates=overwrite,
        timeout=settings.import_timeout_seconds,
    )
    print(
        f"  created: {result.created}  updated: {result.updated}  "
        f"duplicates: {result.duplicates}  errors: {result.errors}"
    )
    for message in result.reported_errors():
        print(f"  ! {message}")
    if result.errors > len(result.reported_errors()):
        print(f"  ... {result.errors - len(result.reported_errors())} more errors")


async def dedupe(family_key: str, dry_run: bool):
    family = get_family(family_key)
    report = await dedupe_routes(RouteStore(async_session), family, dry_run=dry_run)
    verb = "Would remove" if dry_run else "Removed"
    print(
        f"  scanned {report.scanned} {family.label}s, {report.groups} duplicate group(s); "
        f"{verb} {report.removed}"
    )


async def main(argv: list[str]) -> int:
    cmd = argv[0] if argv else ""
    flags = {a for a in argv[1:] if a.startswith("--")}
    args = [a for a in argv[1:] if not a.startswith("--")]
    try:
        if cmd == "create-tables":
            await create_tables()
        elif cmd == "import-routes" and len(args) == 2:
            await import_routes(args[0], Path(args[1]), "--overwrite" in flags)
        elif cmd == "dedupe-routes" and len(args) == 1:
            await dedupe(args[0], "--dry-run" in flags)
        else:
            print(USAGE)
            return 2
    except RouteDeskException as e:
        print(f"  FAILED: {e.message}")
        return 1
    except (OSError, ValueError) as e:
        print(f"  FAILED: {e}")
        return 1
    finally:
        await engine.dispose()
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level.upper())
    sys.exit(asyncio.run(main(sys.argv[1:])))
