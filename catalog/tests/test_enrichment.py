"""Tests for the enhancement client and description enrichment."""

from unittest.mock import MagicMock

import pytest
import requests

from catalog.db import find_by_id, insert_many
from catalog.enhancement import EnhancementClient, build_prompt
from catalog.enrichment import apply_enrichment, enrich_batch, select_candidates
from catalog.errors import EnhancementError, PersistError
from catalog.normalizer import normalize_row
from catalog.tests.conftest import make_row


def _response(payload=None, status=200, json_error=False):
    resp = MagicMock()
    resp.status_code = status
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    if json_error:
        resp.json.side_effect = ValueError("not json")
    else:
        resp.json.return_value = payload
    return resp


def _client(resp=None, error=None) -> EnhancementClient:
    session = MagicMock()
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = resp
    return EnhancementClient(url="https://llm.example/generate", api_key="secret", timeout=5, session=session)


class TestEnhancementClient:
    """Tests for the external text-generation call."""

    def test_build_prompt_embeds_fields(self):
        prompt = build_prompt("Gauze", "Sterile pads", "Wound Care")
        assert "expert in medical sales" in prompt
        assert "Product Name: Gauze" in prompt
        assert "Product Description: Sterile pads" in prompt
        assert "Category: Wound Care" in prompt
        assert prompt.endswith("New Description: ")

    def test_build_prompt_handles_missing_values(self):
        assert "Category: \n" in build_prompt("Gauze", None, None)

    def test_returns_first_choice_text(self):
        client = _client(_response({"choices": [{"text": " Better gauze. "}, {"text": "Other"}]}))
        assert client.enhance_description("Gauze", "Pads", "Wound Care") == "Better gauze."

    def test_posts_prompt_with_bearer_token(self):
        client = _client(_response({"choices": [{"text": "ok"}]}))
        client.enhance_description("Gauze", "Pads", "Wound Care")

        args, kwargs = client._session.post.call_args
        assert args[0] == "https://llm.example/generate"
        assert kwargs["json"] == {"prompt": build_prompt("Gauze", "Pads", "Wound Care")}
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["timeout"] == 5

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"choices": []},
            {"choices": "text"},
            {"choices": [{}]},
            {"choices": [{"text": None}]},
            {"choices": [{"text": "   "}]},
            {"choices": ["plain string"]},
            ["not", "an", "object"],
        ],
    )
    def test_malformed_response_raises(self, payload):
        with pytest.raises(EnhancementError):
            _client(_response(payload)).enhance_description("Gauze", "Pads", "Wound Care")

    def test_non_json_response_raises(self):
        with pytest.raises(EnhancementError):
            _client(_response(json_error=True)).enhance_description("Gauze", "Pads", "Wound Care")

    def test_http_error_raises(self):
        with pytest.raises(EnhancementError):
            _client(_response({"choices": [{"text": "ok"}]}, status=500)).enhance_description("G", "D", "C")

    def test_timeout_raises(self):
        with pytest.raises(EnhancementError) as excinfo:
            _client(error=requests.Timeout("timed out")).enhance_description("G", "D", "C")
        assert isinstance(excinfo.value.__cause__, requests.Timeout)

    def test_unconfigured_endpoint_raises_without_calling(self):
        session = MagicMock()
        client = EnhancementClient(url="", api_key="", session=session)
        with pytest.raises(EnhancementError):
            client.enhance_description("G", "D", "C")
        session.post.assert_not_called()


class TestEnrichment:
    """Tests for selecting, enhancing and applying descriptions."""

    @pytest.fixture
    def stored_products(self, db_path):
        products = [normalize_row(make_row(ProductID=f"P{i}", ProductName=f"Item {i}")) for i in range(12)]
        insert_many(db_path, products)
        return products

    def test_select_candidates_bounded_to_ten(self, db_path, stored_products):
        candidates = select_candidates(db_path)
        assert len(candidates) == 10
        assert all(not p.enriched for p in candidates)

    def test_select_candidates_empty_store(self, db_path):
        assert select_candidates(db_path) == []

    def test_select_candidates_skips_enriched_and_deleted(self, db_path):
        fresh = normalize_row(make_row(ProductID="P1"))
        done = normalize_row(make_row(ProductID="P2"))
        done.enriched = True
        gone = normalize_row(make_row(ProductID="P3"))
        gone.deleted = True
        insert_many(db_path, [fresh, done, gone])

        assert [p.id for p in select_candidates(db_path)] == [fresh.id]

    def test_apply_enrichment_sets_description_and_flag(self, db_path, stored_products):
        product = stored_products[0]
        apply_enrichment(db_path, product, "Generated text")

        loaded = find_by_id(db_path, product.id)
        assert loaded.description == "Generated text"
        assert loaded.enriched is True
        assert loaded.variants[0].description == product.variants[0].description

    def test_apply_enrichment_missing_product_raises(self, db_path):
        with pytest.raises(PersistError):
            apply_enrichment(db_path, normalize_row(make_row()), "text")

    def test_enrich_batch_enriches_all_candidates(self, db_path, fake_client):
        products = [normalize_row(make_row(ProductID=f"P{i}", ProductName=f"Item {i}")) for i in range(10)]
        insert_many(db_path, products)

        result = enrich_batch(db_path, client=fake_client)

        assert result.selected == 10
        assert result.enriched == 10
        for product in products:
            loaded = find_by_id(db_path, product.id)
            assert loaded.enriched is True
            assert loaded.description == f"Enhanced: {product.name}"

    def test_enrich_batch_passes_name_description_category(self, db_path, fake_client):
        product = normalize_row(make_row())
        insert_many(db_path, [product])

        enrich_batch(db_path, client=fake_client)

        fake_client.enhance_description.assert_called_once_with(
            product.name, product.description, product.category_name
        )

    def test_enrich_batch_with_no_candidates(self, db_path, fake_client):
        result = enrich_batch(db_path, client=fake_client)
        assert result.selected == 0
        fake_client.enhance_description.assert_not_called()

    def test_failure_aborts_rest_of_batch(self, db_path, stored_products):
        calls = []

        def enhance(name, description, category):
            calls.append(name)
            if len(calls) == 3:
                raise EnhancementError("bad response")
            return f"Enhanced: {name}"

        client = MagicMock()
        client.enhance_description.side_effect = enhance

        with pytest.raises(EnhancementError):
            enrich_batch(db_path, client=client)

        enriched = [p for p in stored_products if find_by_id(db_path, p.id).enriched]
        assert len(calls) == 3
        assert len(enriched) == 2
        assert {p.name for p in enriched} == set(calls[:2])

    def test_enriched_products_not_selected_again(self, db_path, stored_products, fake_client):
        enrich_batch(db_path, client=fake_client)
        second = enrich_batch(db_path, client=fake_client)
        assert second.selected == 2
