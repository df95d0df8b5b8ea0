"""Shared test fixtures for the web test suite."""

from unittest.mock import MagicMock

import pytest

from catalog.db import insert_many
from catalog.normalizer import normalize_row
from catalog.tests.conftest import feed_text, make_row


@pytest.fixture
def mock_feed_path(tmp_path):
    """Create a temporary feed with two distinct products and one duplicate."""
    feed_file = tmp_path / "data.txt"
    feed_file.write_text(
        feed_text([
            make_row(ProductID="P1", ProductName="Gauze"),
            make_row(ProductID="P2", ProductName="Tape"),
            make_row(ProductID="P1", ProductName="Gauze again"),
        ]),
        encoding="utf-8",
    )
    return str(feed_file)


@pytest.fixture
def mock_enhancement_client():
    """Enhancement client double that never calls the network."""
    client = MagicMock()
    client.enhance_description.return_value = "Generated description"
    return client


@pytest.fixture
def app(tmp_path, mock_feed_path, mock_enhancement_client, monkeypatch):
    """Flask app wired to a temporary database and feed."""
    monkeypatch.delenv("API_USER", raising=False)
    monkeypatch.delenv("API_PASS", raising=False)

    from web.app import create_app

    flask_app = create_app({
        "TESTING": True,
        "CATALOG_DB_PATH": str(tmp_path / "catalog.db"),
        "CATALOG_FEED_PATH": mock_feed_path,
        "ENHANCEMENT_CLIENT": mock_enhancement_client,
    })
    return flask_app


@pytest.fixture
def client(app):
    """Create Flask test client."""
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def stored_product(app):
    """Insert one product directly into the app's database."""
    product = normalize_row(make_row())
    insert_many(app.config["CATALOG_DB_PATH"], [product])
    return product
