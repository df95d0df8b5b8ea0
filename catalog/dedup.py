"""Within-run duplicate detection for feed rows.

A row's canonical key is ``ManufacturerItemId-ProductID-PKG``. The same key
is used for the duplicate check, for recording seen rows, and as the
variant SKU, so a row matching an earlier one in all three fields is always
rejected.
"""

from typing import Any, Mapping, Set

from catalog.validation import field_value

__all__ = ["KEY_SEPARATOR", "build_canonical_key", "DedupTracker"]

KEY_SEPARATOR = "-"


def build_canonical_key(row: Mapping[str, Any]) -> str:
    """Build the canonical key for a feed row."""
    return KEY_SEPARATOR.join(
        (
            field_value(row, "ManufacturerItemId"),
            field_value(row, "ProductID"),
            field_value(row, "PKG"),
        )
    )


class DedupTracker:
    """Set of canonical keys seen during one ingestion run.

    Create one per run and discard it afterwards. It is not thread-safe;
    rows must be fed from a single worker.
    """

    def __init__(self) -> None:
        self._seen: Set[str] = set()

    def is_duplicate(self, row: Mapping[str, Any]) -> bool:
        return build_canonical_key(row) in self._seen

    def record(self, row: Mapping[str, Any]) -> str:
        """Mark a row as seen and return its key."""
        key = build_canonical_key(row)
        self._seen.add(key)
        return key

    def check_and_record(self, row: Mapping[str, Any]) -> bool:
        """Record the row if new.

        Returns:
            True if the row was new, False if it is a duplicate
        """
        if self.is_duplicate(row):
            return False
        self.record(row)
        return True

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, key: object) -> bool:
        return key in self._seen
