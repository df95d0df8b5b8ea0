"""Write side of the ingestion pipeline."""

from catalog.db import insert_many
from catalog.logging_config import get_logger
from catalog.models import Product

__all__ = ["persist_product"]

logger = get_logger("persist")


def persist_product(db_path: str, product: Product) -> None:
    """Insert one normalized product.

    Raises:
        PersistError: If the store rejects the insert
    """
    insert_many(db_path, [product])
    logger.debug(f"Saved product {product.id} (sku {product.variants[0].sku})")
