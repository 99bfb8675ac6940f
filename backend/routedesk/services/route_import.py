"""Bulk route import: batched, concurrent create-or-deduplicate.

Flow for one import call:

    rows ──► batches of settings.import_batch_size (sequential)
               └─► one RowReconciler task per row (concurrent, asyncio.gather)
                     normalize → validate → lookup by identity
                        ├─ found:     duplicate, or update when overwriting
                        └─ not found: insert
                              └─ CONFLICT (a sibling row won the race):
                                   re-query once → duplicate / update / error

A failing row never aborts its siblings or later batches; every outcome is
counted on the shared ImportResult. Counters are plain ints: all row tasks run
on one event loop and only mutate the result between awaits.

There is no cross-row atomicity. Each create or update is its own committed
transaction, so a timed-out or failed import keeps the rows already written.
"""

import asyncio
import enum
import json
import logging
from dataclasses import dataclass, field
from typing import Any

from routedesk.config import settings
from routedesk.middleware.exceptions import ImportRequestError, ImportTimeoutError
from routedesk.repositories.route_store import InsertStatus, RouteStore
from routedesk.services.route_identity import (
    RouteFamily,
    identity_filter,
    normalize_row,
)

logger = logging.getLogger(__name__)


class RowOutcome(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    DUPLICATE = "duplicate"
    ERROR = "error"


@dataclass
class ImportResult:
    """Aggregate outcome of one import call. ``success`` = created + updated."""
    success: int = 0
    duplicates: int = 0
    errors: int = 0
    created: int = 0
    updated: int = 0
    errors_list: list[str] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.success + self.duplicates + self.errors

    def record(self, outcome: RowOutcome, message: str | None = None) -> None:
        if outcome is RowOutcome.CREATED:
            self.created += 1
            self.success += 1
        elif outcome is RowOutcome.UPDATED:
            self.updated += 1
            self.success += 1
        elif outcome is RowOutcome.DUPLICATE:
            self.duplicates += 1
        else:
            self.errors += 1
            self.errors_list.append(message or "Unknown error")

    def reported_errors(self, limit: int | None = None) -> list[str]:
        """First ``limit`` error messages; the ``errors`` counter is never cut."""
        limit = settings.import_error_report_limit if limit is None else limit
        return self.errors_list[:limit]


class RowValidationError(ValueError):
    """A row failed normalization; recorded as a row error, never raised out."""


def _describe(raw_row: Any) -> str:
    return json.dumps(raw_row, default=str, ensure_ascii=False)


class RowReconciler:
    """Decides and applies the outcome of a single imported row."""

    def __init__(
        self,
        store: RouteStore,
        family: RouteFamily,
        result: ImportResult,
        row_timeout: float | None = None,
    ):
        self.store = store
        self.family = family
        self.result = result
        self.row_timeout = row_timeout

    async def reconcile(self, raw_row: Any, overwrite_duplicates: bool = False) -> RowOutcome:
        label = self.family.label
        try:
            outcome, message = await asyncio.wait_for(
                self._decide(raw_row, overwrite_duplicates), timeout=self.row_timeout
            )
        except RowValidationError as exc:
            outcome = RowOutcome.ERROR
            message = str(exc)
            logger.warning(message)
        except asyncio.TimeoutError:
            outcome = RowOutcome.ERROR
            message = f"Error processing {label}: timed out after {self.row_timeout:g}s"
            logger.warning("%s Data: %s", message, _describe(raw_row))
        except Exception as exc:
            outcome = RowOutcome.ERROR
            message = f"Error processing {label}: {exc}"
            logger.warning("%s Data: %s", message, _describe(raw_row), exc_info=True)

        self.result.record(outcome, message)
        return outcome

    async def _decide(
        self, raw_row: Any, overwrite_duplicates: bool
    ) -> tuple[RowOutcome, str | None]:
        label = self.family.label
        model = self.family.model

        if not isinstance(raw_row, dict):
            raise RowValidationError(
                f"{label.capitalize()} is not an object: {_describe(raw_row)}"
            )

        normalized = normalize_row(self.family, raw_row)
        if not normalized.is_valid:
            problems = "; ".join(normalized.problems)
            raise RowValidationError(
                f"{label.capitalize()} with {problems}: {_describe(raw_row)}"
            )

        values = normalized.values
        filters = identity_filter(self.family, values)

        existing = await self.store.find_one(model, filters)
        if existing is not None:
            return await self._resolve_existing(existing, values, overwrite_duplicates)

        inserted = await self.store.insert(model, values)
        if inserted.status is InsertStatus.CREATED:
            logger.debug("Created %s %s", label, inserted.record_id)
            return RowOutcome.CREATED, None

        if inserted.status is InsertStatus.CONFLICT:
            # Another row of this batch inserted the same identity first.
            logger.info("Unique-key race on %s %s, re-checking", label, values["name"])
            existing = await self.store.find_one(model, filters)
            if existing is None:
                return RowOutcome.ERROR, (
                    f"Error processing {label}: unique constraint violated but no "
                    f"matching route was found ({inserted.detail})"
                )
            return await self._resolve_existing(existing, values, overwrite_duplicates)

        return RowOutcome.ERROR, f"Error processing {label}: {inserted.detail}"

    async def _resolve_existing(
        self, existing: Any, values: dict[str, Any], overwrite_duplicates: bool
    ) -> tuple[RowOutcome, str | None]:
        label = self.family.label
        if not overwrite_duplicates:
            logger.debug("Duplicate %s %s (stored id %s)", label, values["name"], existing.id)
            return RowOutcome.DUPLICATE, None

        updated = await self.store.update(self.family.model, existing.id, values)
        if not updated:
            return RowOutcome.ERROR, (
                f"Error processing {label}: route {existing.id} disappeared before it "
                "could be updated"
            )
        logger.debug(
            "Updated %s %s: price %s -> %s", label, existing.id, existing.price, values["price"]
        )
        return RowOutcome.UPDATED, None


class BatchImporter:
    """Runs RowReconcilers batch by batch and aggregates their outcomes."""

    def __init__(
        self,
        store: RouteStore,
        family: RouteFamily,
        batch_size: int | None = None,
        row_timeout: float | None = settings.import_row_timeout_seconds,
    ):
        self.store = store
        self.family = family
        self.batch_size = max(1, batch_size or settings.import_batch_size)
        self.row_timeout = row_timeout

    async def import_rows(self, rows: Any, overwrite_duplicates: bool = False) -> ImportResult:
        if not isinstance(rows, list) or not rows:
            raise ImportRequestError()

        result = ImportResult()
        total = len(rows)
        logger.info(
            "Starting import of %d %ss (overwrite duplicates: %s)",
            total, self.family.label, overwrite_duplicates,
        )

        for start in range(0, total, self.batch_size):
            batch = rows[start:start + self.batch_size]
            if start == 0:
                logger.debug("First row of first batch: %s", _describe(batch[0]))

            reconciler = RowReconciler(self.store, self.family, result, self.row_timeout)
            settled = await asyncio.gather(
                *(reconciler.reconcile(row, overwrite_duplicates) for row in batch),
                return_exceptions=True,
            )
            for row, outcome in zip(batch, settled):
                if isinstance(outcome, Exception):
                    logger.error(
                        "Row task failed outside reconciliation: %s", outcome, exc_info=outcome
                    )
                    result.record(
                        RowOutcome.ERROR, f"Error processing {self.family.label}: {outcome}"
                    )

            processed = min(start + self.batch_size, total)
            logger.info(
                "Processed %d/%d %ss (%d%%) - success: %d, duplicates: %d, errors: %d",
                processed, total, self.family.label, round(processed / total * 100),
                result.success, result.duplicates, result.errors,
            )

        return result


async def run_import(
    store: RouteStore,
    family: RouteFamily,
    rows: Any,
    overwrite_duplicates: bool = False,
    timeout: float | None = None,
) -> ImportResult:
    """Import ``rows`` under the optional whole-call timeout."""
    importer = BatchImporter(
        store, family,
        batch_size=settings.import_batch_size,
        row_timeout=settings.import_row_timeout_seconds,
    )
    if timeout is None:
        return await importer.import_rows(rows, overwrite_duplicates)
    try:
        return await asyncio.wait_for(importer.import_rows(rows, overwrite_duplicates), timeout)
    except asyncio.TimeoutError:
        logger.error("Import of %ss timed out after %ss", family.label, timeout)
        raise ImportTimeoutError(timeout) from None
