"""Exception hierarchy for the catalog pipeline.

Row-level skips (invalid or duplicate rows) are not errors and have no
exception type; see ``catalog.pipeline.RowOutcome``.
"""

__all__ = [
    "CatalogError",
    "DecodeError",
    "PersistError",
    "EnhancementError",
    "NotFoundError",
    "InvalidRequestError",
    "RunInProgressError",
]


class CatalogError(Exception):
    """Base exception for all catalog failures."""


class DecodeError(CatalogError):
    """Raised when the input feed cannot be read or decoded."""


class PersistError(CatalogError):
    """Raised when the document store rejects a write."""


class EnhancementError(CatalogError):
    """Raised when the text-generation call fails or returns unusable data."""


class NotFoundError(CatalogError):
    """Raised when a requested product does not exist."""


class InvalidRequestError(CatalogError):
    """Raised when a product operation is not permitted or malformed."""


class RunInProgressError(CatalogError):
    """Raised when an import run is triggered while another is still running."""
