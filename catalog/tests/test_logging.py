"""Tests for structured event logging."""

import json
import logging

import pytest

from catalog.logging_config import log_catalog_event, run_context, setup_logging
from catalog.pipeline import run_import
from catalog.tests.conftest import make_row


@pytest.fixture
def log_dir(tmp_path):
    """Route catalog logs to a temporary JSONL directory."""
    path = tmp_path / "logs"
    setup_logging(log_to_console=False, log_dir=path)
    yield path
    logger = logging.getLogger("catalog")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def _read_events(log_dir):
    entries = []
    for path in log_dir.glob("catalog_*.jsonl"):
        entries.extend(json.loads(line) for line in path.read_text(encoding="utf-8").splitlines())
    return [e for e in entries if "event_type" in e]


def test_event_written_as_jsonl(log_dir):
    log_catalog_event("persist_failed", {"message": "insert failed", "sku": "M1-P1-BX"}, level=logging.ERROR)

    [event] = _read_events(log_dir)
    assert event["event_type"] == "persist_failed"
    assert event["level"] == "ERROR"
    assert event["message"] == "insert failed"
    assert event["sku"] == "M1-P1-BX"


def test_run_context_tags_events_until_exit(log_dir):
    with run_context("abc123", "schedule"):
        log_catalog_event("ingest_completed", {"message": "done"})
    log_catalog_event("ingest_completed", {"message": "outside"})

    inside, outside = _read_events(log_dir)
    assert inside["run_id"] == "abc123"
    assert inside["trigger"] == "schedule"
    assert "run_id" not in outside


def test_import_events_share_run_id(log_dir, db_path, write_feed, fake_client):
    result = run_import(db_path, write_feed([make_row()]), client=fake_client, trigger="cli")

    events = _read_events(log_dir)
    assert {e["event_type"] for e in events} >= {"ingest_completed", "run_completed"}
    assert {e["run_id"] for e in events} == {result.run_id}
    assert {e["trigger"] for e in events} == {"cli"}
