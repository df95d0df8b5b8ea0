"""Description enrichment for stored products.

Selects a bounded batch of products whose description has not been
enriched yet, asks the enhancement service for new text, and writes it back
while flipping the ``enriched`` flag.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from catalog.config import DB_PATH, ENRICH_BATCH_SIZE
from catalog.db import find_products, update_one
from catalog.enhancement import EnhancementClient
from catalog.errors import PersistError
from catalog.logging_config import get_logger, log_catalog_event
from catalog.models import Product

__all__ = ["EnrichResult", "select_candidates", "apply_enrichment", "enrich_batch"]

logger = get_logger("enrichment")


@dataclass
class EnrichResult:
    """Outcome of one enrichment batch."""

    selected: int = 0
    enriched_ids: List[str] = field(default_factory=list)

    @property
    def enriched(self) -> int:
        return len(self.enriched_ids)


def select_candidates(db_path: str = DB_PATH, limit: int = ENRICH_BATCH_SIZE) -> List[Product]:
    """Get up to ``limit`` non-deleted products that are not enriched yet.

    No ordering is guaranteed.
    """
    return find_products(db_path, filters={"enriched": False, "deleted": False}, limit=limit)


def apply_enrichment(db_path: str, product: Product, text: str) -> None:
    """Store generated text as the product description and mark it enriched.

    Raises:
        PersistError: If the product no longer matches or the write fails
    """
    filters = {"id": product.id}
    if product.variants:
        filters["variant_id"] = product.variants[0].id

    matched = update_one(db_path, filters, {"description": text, "enriched": True})
    if not matched:
        raise PersistError(f"Product {product.id} not found for enrichment")


def enrich_batch(
    db_path: str = DB_PATH,
    client: Optional[EnhancementClient] = None,
    limit: int = ENRICH_BATCH_SIZE,
) -> EnrichResult:
    """Enrich one batch of candidates.

    The first enhancement or write failure stops the batch: candidates after
    it are left untouched and the error propagates to the caller.

    Raises:
        EnhancementError: If the service call fails
        PersistError: If writing the result fails
    """
    client = client or EnhancementClient()
    candidates = select_candidates(db_path, limit=limit)
    result = EnrichResult(selected=len(candidates))

    for product in candidates:
        text = client.enhance_description(product.name, product.description, product.category_name)
        apply_enrichment(db_path, product, text)
        result.enriched_ids.append(product.id)
        log_catalog_event(
            "enrichment_applied",
            {"message": f"Enriched product {product.id}", "product_id": product.id},
            logger_name="enrichment",
        )

    logger.info(f"{result.enriched} of {result.selected} products have been enhanced")
    return result
