"""Configuration and constants for catalog ingestion and enrichment."""

import os
from pathlib import Path

__all__ = [
    "PROJECT_ROOT",
    "FEED_PATH",
    "FEED_DELIMITER",
    "DB_PATH",
    "REQUIRED_FIELDS",
    "ENRICH_BATCH_SIZE",
    "ENHANCEMENT_URL",
    "ENHANCEMENT_API_KEY",
    "REQUEST_TIMEOUT",
    "SCHEDULE_TIME",
    "SCHEDULER_POLL_SECONDS",
    "ITEM_CODE_PREFIX",
    "DEFAULT_CURRENCY",
    "LOG_DIR",
]

PROJECT_ROOT = Path(__file__).parent.parent

# Input feed (tab-separated, header row). The location is fixed per deployment.
FEED_PATH = os.getenv("CATALOG_FEED_PATH", "data/data.txt")
FEED_DELIMITER = "\t"

# Document store
DB_PATH = os.getenv("CATALOG_DB_PATH", "data/catalog.db")

# Columns that must be non-empty for a row to become a catalog entry
REQUIRED_FIELDS = ("PKG", "ProductID", "ManufacturerItemId")

# Enrichment settings
ENRICH_BATCH_SIZE = 10

# External text-generation endpoint (OPENAPI_* kept for older .env files)
ENHANCEMENT_URL = os.getenv("ENHANCEMENT_URL", os.getenv("OPENAPI_URL", ""))
ENHANCEMENT_API_KEY = os.getenv("ENHANCEMENT_API_KEY", os.getenv("OPENAPI_API", ""))
REQUEST_TIMEOUT = float(os.getenv("ENHANCEMENT_TIMEOUT", "30"))

# Daily run (HH:MM, local time)
SCHEDULE_TIME = os.getenv("CATALOG_SCHEDULE_TIME", "00:00")
SCHEDULER_POLL_SECONDS = 30

# Normalization defaults
ITEM_CODE_PREFIX = "HSI"
DEFAULT_CURRENCY = "USD"

# Logs
LOG_DIR = PROJECT_ROOT / "logs"
