"""Maintenance for shipping route collections: clear and deduplicate."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from routedesk.repositories.route_store import RouteStore
from routedesk.services.route_identity import RouteFamily, identity_key

logger = logging.getLogger(__name__)


@dataclass
class DedupeReport:
    scanned: int = 0
    groups: int = 0
    removed_ids: list[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def removed(self) -> int:
        return len(self.removed_ids)


async def dedupe_routes(
    store: RouteStore, family: RouteFamily, dry_run: bool = False
) -> DedupeReport:
    """Keep the oldest route of every identity group and delete the rest.

    Rows written before the unique constraint existed are the only way two
    stored routes can share an identity key.
    """
    rows = await store.all_by_age(family.model)
    groups: dict[tuple, list] = defaultdict(list)
    for row in rows:
        values = {name: getattr(row, name) for name in family.identity_fields}
        groups[identity_key(family, values)].append(row)

    report = DedupeReport(scanned=len(rows), dry_run=dry_run)
    for key, members in groups.items():
        if len(members) < 2:
            continue
        report.groups += 1
        keeper, *extras = members
        logger.info(
            "Duplicate %s group %s: keeping %s, removing %d",
            family.label, keeper.name, keeper.id, len(extras),
        )
        report.removed_ids.extend(r.id for r in extras)

    if not dry_run and report.removed_ids:
        deleted = await store.delete_ids(family.model, report.removed_ids)
        logger.info("Deleted %d duplicate %ss", deleted, family.label)

    return report


async def clear_routes(store: RouteStore, family: RouteFamily) -> int:
    deleted = await store.delete_all(family.model)
    logger.warning("Cleared %d %ss", deleted, family.label)
    return deleted
