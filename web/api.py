"""Product API endpoints.

Exposes the on-demand import trigger and read/update/soft-delete over
stored products. Every response is a ``{"success": ..., ...}`` envelope.
"""

import logging
from typing import Any, Dict, Tuple

from flask import Blueprint, current_app, jsonify, request

from catalog.errors import CatalogError, InvalidRequestError, NotFoundError, RunInProgressError
from catalog.pipeline import run_import
from catalog.products import delete_product, get_product, list_products, update_product

__all__ = ["api"]

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__, url_prefix="/api/v1/product")


def _db_path() -> str:
    return current_app.config["CATALOG_DB_PATH"]


def _failure(message: str, status: int) -> Tuple[Any, int]:
    return jsonify({"success": False, "message": message}), status


@api.errorhandler(NotFoundError)
def _handle_not_found(error: NotFoundError):
    return _failure(str(error), 404)


@api.errorhandler(InvalidRequestError)
def _handle_invalid_request(error: InvalidRequestError):
    return _failure(str(error), 400)


@api.route("", methods=["POST"])
def import_products():
    """Run feed ingestion and one enrichment batch now."""
    logger.info("Importing products from feed")
    try:
        result = run_import(
            db_path=_db_path(),
            feed_path=current_app.config["CATALOG_FEED_PATH"],
            client=current_app.config.get("ENHANCEMENT_CLIENT"),
            trigger="api",
        )
    except RunInProgressError:
        return _failure("An import is already in progress", 409)
    except CatalogError:
        logger.exception("Error inserting products")
        return _failure("Error inserting products", 400)

    return jsonify({"success": True, "message": result.message})


@api.route("", methods=["GET"])
def get_all_products():
    products = list_products(_db_path())
    return jsonify({"success": True, "data": [p.to_document() for p in products]})


@api.route("/<product_id>", methods=["GET"])
def get_one_product(product_id: str):
    product = get_product(product_id, _db_path())
    return jsonify({"success": True, "data": product.to_document()})


@api.route("/<product_id>", methods=["PATCH"])
def patch_product(product_id: str):
    updates: Dict[str, Any] = request.get_json(silent=True) or {}
    message = update_product(product_id, updates, _db_path())
    return jsonify({"success": True, "message": message})


@api.route("/<product_id>", methods=["DELETE"])
def remove_product(product_id: str):
    message = delete_product(product_id, _db_path())
    return jsonify({"success": True, "message": message})
