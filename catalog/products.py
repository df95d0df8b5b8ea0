"""Product read/update/delete operations used by the web API."""

from typing import Any, Dict, List

from catalog.config import DB_PATH
from catalog.db import find_by_id, find_products, update_one
from catalog.errors import InvalidRequestError, NotFoundError
from catalog.models import Product

__all__ = [
    "UPDATABLE_FIELDS",
    "get_product",
    "list_products",
    "update_product",
    "delete_product",
]

# Top-level fields a client may change, with the JSON type each must carry.
# Identity, timestamps, the variants list and the enrichment/deletion flags
# are managed by the pipeline.
UPDATABLE_FIELDS: Dict[str, type] = {
    "name": str,
    "type": str,
    "short_description": str,
    "description": str,
    "vendor_id": str,
    "manufacturer_id": str,
    "storefront_price_visibility": str,
    "category_name": str,
    "availability": bool,
    "published": str,
    "is_taxable": bool,
    "is_fragile": bool,
    "quantity_on_hand": int,
    "options": list,
}


def _check_types(updates: Dict[str, Any]) -> None:
    for name, value in updates.items():
        expected = UPDATABLE_FIELDS[name]
        # bool is a subclass of int
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise InvalidRequestError(f"Field {name} must be of type {expected.__name__}")


def get_product(product_id: str, db_path: str = DB_PATH) -> Product:
    """Get a product by document id.

    Raises:
        NotFoundError: If no product has this id
    """
    product = find_by_id(db_path, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


def list_products(db_path: str = DB_PATH, include_deleted: bool = False) -> List[Product]:
    """Get all products, excluding soft-deleted ones by default."""
    filters = None if include_deleted else {"deleted": False}
    return find_products(db_path, filters=filters)


def update_product(product_id: str, updates: Dict[str, Any], db_path: str = DB_PATH) -> str:
    """Update top-level fields of a product.

    Raises:
        InvalidRequestError: If ``updates`` is empty, names a protected field
            or gives a value of the wrong type
        NotFoundError: If the product does not exist
    """
    if not isinstance(updates, dict) or not updates:
        raise InvalidRequestError("No fields to update")
    rejected = sorted(set(updates) - UPDATABLE_FIELDS.keys())
    if rejected:
        raise InvalidRequestError(f"Fields cannot be updated: {', '.join(rejected)}")
    _check_types(updates)

    product = get_product(product_id, db_path)
    if not update_one(db_path, {"id": product.id}, updates):
        raise NotFoundError("Product not found")
    return f"Product with {product.id} was updated"


def delete_product(product_id: str, db_path: str = DB_PATH) -> str:
    """Soft-delete a product. Documents are never physically removed.

    Raises:
        NotFoundError: If the product does not exist
        InvalidRequestError: If the product is marked unavailable (it may have
            open orders)
    """
    product = get_product(product_id, db_path)
    if not product.availability:
        raise InvalidRequestError("Cannot delete product with existing orders")

    update_one(db_path, {"id": product.id}, {"deleted": True})
    return f"Product with {product.id} is deleted"
