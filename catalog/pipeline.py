"""Ingestion and enrichment orchestration.

A run streams the feed row by row through validate -> dedup -> normalize,
inserts each accepted product, then enriches one batch of stored products.

Failure policy:
- Invalid and duplicate rows are skipped silently (counted, logged at debug).
- A failed insert is logged and counted; the next row is still processed.
- A decode failure aborts the run. Rows already inserted stay in the store.
- The first enrichment failure aborts the rest of the batch.

Only one run may execute at a time in a process; a second caller gets
``RunInProgressError`` instead of waiting.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from catalog.config import DB_PATH, ENRICH_BATCH_SIZE, FEED_PATH
from catalog.db import init_db
from catalog.dedup import DedupTracker
from catalog.enhancement import EnhancementClient
from catalog.enrichment import EnrichResult, enrich_batch
from catalog.errors import CatalogError, DecodeError, PersistError, RunInProgressError
from catalog.feed import read_feed
from catalog.logging_config import get_logger, log_catalog_event, run_context
from catalog.models import Product, new_id
from catalog.normalizer import normalize_row
from catalog.persist import persist_product
from catalog.validation import is_valid_row

__all__ = [
    "RowOutcome",
    "RunState",
    "IngestResult",
    "ImportResult",
    "process_row",
    "ingest_rows",
    "ingest_feed",
    "run_import",
    "is_run_in_progress",
]

logger = get_logger("pipeline")

_run_lock = threading.Lock()


class RowOutcome(str, Enum):
    INVALID = "invalid"
    DUPLICATE = "duplicate"
    ACCEPTED = "accepted"


class RunState(str, Enum):
    IDLE = "idle"
    DECODING = "decoding"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass
class IngestResult:
    """Counters for one ingestion run."""

    state: RunState = RunState.IDLE
    total: int = 0
    persisted: int = 0
    invalid: int = 0
    duplicates: int = 0
    failed: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "total": self.total,
            "persisted": self.persisted,
            "invalid": self.invalid,
            "duplicates": self.duplicates,
            "failed": self.failed,
        }


@dataclass
class ImportResult:
    """Outcome of a full ingestion + enrichment run."""

    run_id: str = ""
    ingest: IngestResult = field(default_factory=IngestResult)
    enrich: EnrichResult = field(default_factory=EnrichResult)

    @property
    def message(self) -> str:
        return (
            f"Products inserted successfully: {self.ingest.persisted} new, "
            f"{self.enrich.enriched} enhanced"
        )


def process_row(row: Mapping[str, Any], tracker: DedupTracker) -> Tuple[RowOutcome, Optional[Product]]:
    """Run one row through validate -> dedup -> normalize.

    Records the row's key in ``tracker`` when accepted. Does no I/O.
    """
    if not is_valid_row(row):
        return RowOutcome.INVALID, None
    if tracker.is_duplicate(row):
        return RowOutcome.DUPLICATE, None
    key = tracker.record(row)
    return RowOutcome.ACCEPTED, normalize_row(row, key=key)


def ingest_rows(
    rows: Iterable[Mapping[str, Any]],
    db_path: str = DB_PATH,
    tracker: Optional[DedupTracker] = None,
) -> IngestResult:
    """Stream decoded rows into the store, one insert per accepted row.

    Raises:
        DecodeError: If reading ``rows`` fails; the partial counts are logged
    """
    tracker = tracker if tracker is not None else DedupTracker()
    result = IngestResult(state=RunState.DECODING)

    try:
        for line_number, row in enumerate(rows, 2):
            result.total += 1
            outcome, product = process_row(row, tracker)

            if outcome is RowOutcome.INVALID:
                result.invalid += 1
                logger.debug(f"Skipping invalid row at line {line_number}")
                continue
            if outcome is RowOutcome.DUPLICATE:
                result.duplicates += 1
                logger.debug(f"Skipping duplicate row at line {line_number}")
                continue

            try:
                persist_product(db_path, product)
            except PersistError as e:
                result.failed += 1
                log_catalog_event(
                    "persist_failed",
                    {
                        "message": f"Failed to save row at line {line_number}: {e}",
                        "line": line_number,
                        "sku": product.variants[0].sku,
                    },
                    level=logging.ERROR,
                    logger_name="pipeline",
                )
                continue
            result.persisted += 1
    except DecodeError:
        result.state = RunState.ABORTED
        log_catalog_event("ingest_aborted", {"message": "Feed decoding failed", **result.as_dict()},
                          level=logging.ERROR, logger_name="pipeline")
        raise

    result.state = RunState.COMPLETED
    log_catalog_event("ingest_completed", {"message": "Feed parsing and saving completed", **result.as_dict()},
                      logger_name="pipeline")
    return result


def ingest_feed(db_path: str = DB_PATH, feed_path: str = FEED_PATH) -> IngestResult:
    """Ingest the feed file into the store with a fresh dedup tracker."""
    init_db(db_path)
    logger.info(f"Converting feed {feed_path} into products")
    return ingest_rows(read_feed(feed_path), db_path=db_path, tracker=DedupTracker())


def is_run_in_progress() -> bool:
    return _run_lock.locked()


def run_import(
    db_path: str = DB_PATH,
    feed_path: str = FEED_PATH,
    client: Optional[EnhancementClient] = None,
    enrich_limit: int = ENRICH_BATCH_SIZE,
    trigger: str = "manual",
) -> ImportResult:
    """Ingest the feed, then enrich one batch of products.

    Used by both the daily schedule and the on-demand trigger. Every event
    logged during the run carries its ``run_id`` and ``trigger``.

    Raises:
        RunInProgressError: If another run is executing
        CatalogError: If ingestion aborts or enrichment fails
    """
    if not _run_lock.acquire(blocking=False):
        raise RunInProgressError("An import run is already in progress")

    result = ImportResult(run_id=new_id())
    try:
        with run_context(result.run_id, trigger):
            try:
                result.ingest = ingest_feed(db_path, feed_path)
                result.enrich = enrich_batch(db_path, client=client, limit=enrich_limit)
            except CatalogError as e:
                log_catalog_event("run_failed", {"message": f"Error importing products: {e}"},
                                  level=logging.ERROR, logger_name="pipeline")
                raise

            log_catalog_event(
                "run_completed",
                {"message": result.message, **result.ingest.as_dict(), "enriched": result.enrich.enriched},
                logger_name="pipeline",
            )
    finally:
        _run_lock.release()
    return result
