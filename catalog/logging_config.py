"""Logging configuration for the catalog pipeline.

Console output for operators plus a daily JSONL file under ``logs/`` that
records structured pipeline events (rows skipped, persist failures,
enrichment results, run outcomes). Events logged inside ``run_context`` carry
the run id and trigger, so one import can be followed through the file.
"""

import json
import logging
import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from catalog.config import LOG_DIR

__all__ = [
    "setup_logging",
    "get_logger",
    "log_catalog_event",
    "run_context",
    "LOG_DIR",
]

# Run id and trigger of the import currently executing. Runs are single-flight,
# so at most one is bound at a time.
_active_run: Dict[str, str] = {}


class JSONLFileHandler(logging.Handler):
    """Handler that appends structured JSONL records, one file per day."""

    def __init__(self, log_dir: Path, prefix: str = "catalog"):
        super().__init__()
        self.log_dir = log_dir
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.prefix = prefix

    def _get_log_file(self) -> Path:
        today = datetime.now().strftime("%Y%m%d")
        return self.log_dir / f"{self.prefix}_{today}.jsonl"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "timestamp": datetime.now().isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            if hasattr(record, "event_type"):
                entry["event_type"] = record.event_type
            if hasattr(record, "extra_data"):
                entry.update(record.extra_data)
            if record.exc_info:
                entry["exception"] = self.format(record).splitlines()[-1]

            with open(self._get_log_file(), "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")
        except Exception:
            self.handleError(record)


class ColoredConsoleHandler(logging.StreamHandler):
    """Console handler with colored level names when attached to a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if hasattr(self.stream, "isatty") and self.stream.isatty():
            color = self.COLORS.get(record.levelname, "")
            message = message.replace(
                f"[{record.levelname}]", f"[{color}{record.levelname}{self.RESET}]", 1
            )
        return message


def setup_logging(
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """Set up logging for the catalog package.

    Args:
        level: Logging level (default: INFO)
        log_to_file: Whether to log to JSONL file
        log_to_console: Whether to log to console
        log_dir: Custom log directory (default: project logs/)

    Returns:
        Configured ``catalog`` logger
    """
    logger = logging.getLogger("catalog")
    logger.setLevel(level)
    logger.handlers.clear()

    if log_to_console:
        console_handler = ColoredConsoleHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S")
        )
        logger.addHandler(console_handler)

    if log_to_file:
        file_handler = JSONLFileHandler(log_dir or LOG_DIR)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "catalog") -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (will be prefixed with 'catalog.')
    """
    if name == "catalog":
        return logging.getLogger("catalog")
    return logging.getLogger(f"catalog.{name}")


@contextmanager
def run_context(run_id: str, trigger: str) -> Iterator[None]:
    """Tag catalog events logged inside the block with ``run_id`` and ``trigger``."""
    _active_run.update(run_id=run_id, trigger=trigger)
    try:
        yield
    finally:
        _active_run.clear()


def log_catalog_event(
    event_type: str,
    data: Dict[str, Any],
    level: int = logging.INFO,
    logger_name: str = "catalog",
) -> None:
    """Log a structured pipeline event.

    Args:
        event_type: Type of event (e.g., 'row_skipped', 'persist_failed', 'run_completed')
        data: Event-specific data
        level: Log level
        logger_name: Logger to use
    """
    logger = get_logger(logger_name)
    if not logger.isEnabledFor(level):
        return

    record = logger.makeRecord(
        logger.name,
        level,
        "(catalog)",
        0,
        data.get("message", event_type),
        (),
        None,
    )
    record.event_type = event_type
    record.extra_data = {**_active_run, **{k: v for k, v in data.items() if k != "message"}}

    logger.handle(record)
