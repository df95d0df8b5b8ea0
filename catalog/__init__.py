"""Catalog feed ingestion and description enrichment."""

__version__ = "0.1.0"

# Re-export main components for convenient imports
from catalog.config import DB_PATH, ENRICH_BATCH_SIZE, FEED_PATH
from catalog.dedup import DedupTracker, build_canonical_key
from catalog.enhancement import EnhancementClient
from catalog.enrichment import enrich_batch, select_candidates
from catalog.errors import (
    CatalogError,
    DecodeError,
    EnhancementError,
    InvalidRequestError,
    NotFoundError,
    PersistError,
    RunInProgressError,
)
from catalog.models import Image, Product, Variant
from catalog.pipeline import ingest_feed, run_import

__all__ = [
    # Version
    "__version__",
    # Config
    "DB_PATH",
    "ENRICH_BATCH_SIZE",
    "FEED_PATH",
    # Models
    "Image",
    "Product",
    "Variant",
    # Errors
    "CatalogError",
    "DecodeError",
    "EnhancementError",
    "InvalidRequestError",
    "NotFoundError",
    "PersistError",
    "RunInProgressError",
    # Core functions
    "DedupTracker",
    "build_canonical_key",
    "EnhancementClient",
    "enrich_batch",
    "select_candidates",
    "ingest_feed",
    "run_import",
]
