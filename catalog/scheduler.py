"""Daily schedule for the import run."""

import logging
from typing import Callable, Optional

import schedule

from catalog.config import DB_PATH, FEED_PATH, SCHEDULE_TIME, SCHEDULER_POLL_SECONDS
from catalog.enhancement import EnhancementClient
from catalog.errors import CatalogError, RunInProgressError
from catalog.logging_config import get_logger, log_catalog_event
from catalog.pipeline import run_import
from catalog.shutdown import ShutdownHandler

__all__ = ["scheduled_import", "build_scheduler", "run_scheduler"]

logger = get_logger("scheduler")


def scheduled_import(
    db_path: str = DB_PATH,
    feed_path: str = FEED_PATH,
    client: Optional[EnhancementClient] = None,
) -> None:
    """Job body for the daily run.

    Failures are logged rather than raised so the scheduler keeps running.
    """
    try:
        result = run_import(db_path, feed_path, client=client, trigger="schedule")
    except RunInProgressError:
        logger.warning("Skipping scheduled import: a run is already in progress")
        return
    except CatalogError as e:
        log_catalog_event(
            "scheduled_run_failed",
            {"message": f"Scheduled import failed: {e}"},
            level=logging.ERROR,
            logger_name="scheduler",
        )
        return
    logger.info(result.message)


def build_scheduler(job: Callable[[], None], at: str = SCHEDULE_TIME) -> schedule.Scheduler:
    """Create a scheduler that runs ``job`` once a day at ``at`` (HH:MM)."""
    scheduler = schedule.Scheduler()
    scheduler.every().day.at(at).do(job).tag("catalog-import")
    return scheduler


def run_scheduler(
    job: Callable[[], None],
    at: str = SCHEDULE_TIME,
    poll_seconds: float = SCHEDULER_POLL_SECONDS,
    shutdown: Optional[ShutdownHandler] = None,
) -> None:
    """Block, running ``job`` daily until a shutdown signal arrives."""
    scheduler = build_scheduler(job, at=at)
    handler = shutdown or ShutdownHandler().install()
    logger.info(f"Scheduler started; next run at {scheduler.next_run}")

    try:
        while not handler.shutdown_requested:
            scheduler.run_pending()
            handler.wait(poll_seconds)
    finally:
        scheduler.clear()
        if shutdown is None:
            handler.uninstall()
        logger.info("Scheduler stopped")
