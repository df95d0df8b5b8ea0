"""Mapping from validated feed rows to canonical Product records."""

from typing import Any, Mapping, Optional

from catalog.config import DEFAULT_CURRENCY, ITEM_CODE_PREFIX
from catalog.dedup import build_canonical_key
from catalog.models import Image, Product, Variant
from catalog.validation import field_value

__all__ = ["normalize_row", "parse_availability"]

_UNAVAILABLE_VALUES = {"0", "false", "no", "n", "unavailable", "out of stock", "discontinued"}


def parse_availability(value: str) -> bool:
    """Interpret the feed's availability column. Blank means available."""
    return value.strip().lower() not in _UNAVAILABLE_VALUES


def normalize_row(row: Mapping[str, Any], key: Optional[str] = None) -> Product:
    """Map one validated, non-duplicate row to a Product with a single Variant.

    Args:
        row: Decoded feed row
        key: Canonical key already computed by the dedup step

    Returns:
        New Product (not yet persisted)
    """
    sku = key if key is not None else build_canonical_key(row)
    packaging = field_value(row, "PKG")
    item_description = field_value(row, "ItemDescription")
    manufacturer_item_code = field_value(row, "ManufacturerItemCode")

    variant = Variant(
        available=parse_availability(field_value(row, "availbility")),
        attributes={
            "packaging": packaging,
            "description": item_description,
        },
        cost=field_value(row, "price"),
        price=field_value(row, "price"),
        currency=field_value(row, "currency") or DEFAULT_CURRENCY,
        manufacturer_item_code=manufacturer_item_code,
        packaging=packaging,
        description=item_description,
        sku=sku,
        images=[Image(file_name="", cdn_link=None, i=0, alt=None)],
        item_code=f"{ITEM_CODE_PREFIX} {manufacturer_item_code}",
    )

    return Product(
        product_id=field_value(row, "ProductID"),
        name=field_value(row, "ProductName"),
        type=field_value(row, "type"),
        short_description=field_value(row, "shortDescription"),
        description=item_description,
        vendor_id=field_value(row, "vendorId"),
        manufacturer_id=field_value(row, "ManufacturerItemId"),
        storefront_price_visibility=field_value(row, "storefrontPriceVisibility"),
        category_name=field_value(row, "categoryName"),
        variants=[variant],
    )
