"""Shared test fixtures for the catalog test suite."""

from pathlib import Path
from typing import Dict, List
from unittest.mock import MagicMock

import pytest

from catalog.db import init_db

FEED_COLUMNS = [
    "ManufacturerItemId",
    "ProductID",
    "PKG",
    "ProductName",
    "type",
    "shortDescription",
    "ItemDescription",
    "vendorId",
    "storefrontPriceVisibility",
    "categoryName",
    "availbility",
    "price",
    "currency",
    "ManufacturerItemCode",
]


def make_row(**overrides: str) -> Dict[str, str]:
    """Build a complete feed row; keyword args replace individual fields."""
    row = {
        "ManufacturerItemId": "M1",
        "ProductID": "P1",
        "PKG": "BX",
        "ProductName": "Gauze",
        "type": "simple",
        "shortDescription": "Sterile gauze pads",
        "ItemDescription": "Gauze Sponge 4 x 4 Inch 12-Ply Sterile",
        "vendorId": "V100",
        "storefrontPriceVisibility": "visible",
        "categoryName": "Wound Care",
        "availbility": "1",
        "price": "12.50",
        "currency": "USD",
        "ManufacturerItemCode": "MIC-001",
    }
    row.update(overrides)
    return row


def feed_text(rows: List[Dict[str, str]]) -> str:
    """Render rows as tab-separated feed text with a header line."""
    lines = ["\t".join(FEED_COLUMNS)]
    for row in rows:
        lines.append("\t".join(row.get(col, "") for col in FEED_COLUMNS))
    return "\n".join(lines) + "\n"


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """Create a temporary, initialized database."""
    path = str(tmp_path / "catalog.db")
    init_db(path)
    return path


@pytest.fixture
def write_feed(tmp_path: Path):
    """Write feed rows to a temporary file and return its path."""

    def _write(rows: List[Dict[str, str]], name: str = "data.txt") -> str:
        path = tmp_path / name
        path.write_text(feed_text(rows), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def fake_client():
    """Enhancement client double that returns a text per product name."""
    client = MagicMock()
    client.enhance_description.side_effect = lambda name, description, category: f"Enhanced: {name}"
    return client
