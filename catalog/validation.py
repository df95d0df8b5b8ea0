"""Row validation for feed rows."""

from typing import Any, Mapping

from catalog.config import REQUIRED_FIELDS

__all__ = ["field_value", "is_valid_row"]


def field_value(row: Mapping[str, Any], name: str) -> str:
    """Return a row field as-is, or '' if absent or not a string."""
    value = row.get(name)
    if not isinstance(value, str):
        return ""
    return value


def is_valid_row(row: Mapping[str, Any]) -> bool:
    """Check that PKG, ProductID and ManufacturerItemId are all non-empty.

    Values are not trimmed, so whitespace counts as content. No other field
    is checked; price and cost pass through as-is.
    """
    return all(field_value(row, name) for name in REQUIRED_FIELDS)
