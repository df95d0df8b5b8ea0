"""Command-line interface for catalog ingestion and enrichment."""

import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from catalog.config import DB_PATH, ENRICH_BATCH_SIZE, FEED_PATH, PROJECT_ROOT, SCHEDULE_TIME
from catalog.db import count_products, init_db
from catalog.enrichment import enrich_batch
from catalog.errors import CatalogError
from catalog.logging_config import setup_logging
from catalog.pipeline import ingest_feed, run_import
from catalog.scheduler import run_scheduler, scheduled_import

__all__ = ["main", "parse_args", "show_stats"]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Catalog feed ingestion and description enrichment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Ingest the feed and enrich one batch (same as the daily job)
  python -m catalog.cli

  # Only load the feed into the database
  python -m catalog.cli --ingest

  # Only enrich up to 5 products
  python -m catalog.cli --enrich --limit 5

  # Run every day at midnight until stopped
  python -m catalog.cli --schedule

  # Show database statistics
  python -m catalog.cli --stats
        """,
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--ingest", action="store_true", help="Only ingest the feed")
    mode.add_argument("--enrich", action="store_true", help="Only enrich stored products")
    mode.add_argument("--schedule", action="store_true", help=f"Run daily at {SCHEDULE_TIME} until stopped")
    mode.add_argument("--stats", action="store_true", help="Show database statistics and exit")

    parser.add_argument("--db", default=DB_PATH, help=f"SQLite database path (default: {DB_PATH})")
    parser.add_argument("--feed", default=FEED_PATH, help=f"Feed file path (default: {FEED_PATH})")
    parser.add_argument(
        "--limit",
        type=int,
        default=ENRICH_BATCH_SIZE,
        help=f"Products to enrich per run (default: {ENRICH_BATCH_SIZE})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log per-row decisions")

    return parser.parse_args(argv)


def show_stats(db_path: str) -> None:
    """Display database statistics."""
    init_db(db_path)

    print(f"\n{'='*50}")
    print(f"Database: {db_path}")
    print(f"{'='*50}")
    print(f"\nTotal products:   {count_products(db_path)}")
    print(f"Active products:  {count_products(db_path, {'deleted': False})}")
    print(f"Enriched:         {count_products(db_path, {'enriched': True})}")
    print(f"Awaiting enrichment: {count_products(db_path, {'enriched': False, 'deleted': False})}")
    print()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    load_dotenv(dotenv_path=PROJECT_ROOT / ".env")
    args = parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.stats:
        show_stats(args.db)
        return 0

    if args.schedule:
        run_scheduler(lambda: scheduled_import(args.db, args.feed))
        return 0

    try:
        if args.ingest:
            result = ingest_feed(args.db, args.feed)
            print(f"Ingested {result.persisted} new products "
                  f"({result.invalid} invalid, {result.duplicates} duplicate, {result.failed} failed)")
        elif args.enrich:
            init_db(args.db)
            enriched = enrich_batch(args.db, limit=args.limit)
            print(f"{enriched.enriched} of {enriched.selected} products have been enhanced")
        else:
            print(run_import(args.db, args.feed, enrich_limit=args.limit, trigger="cli").message)
    except CatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
