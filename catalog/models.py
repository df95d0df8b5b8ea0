"""Data models for catalog products."""

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

__all__ = ["Image", "Variant", "Product", "new_id", "utc_now"]


def new_id() -> str:
    """Generate an opaque document identifier."""
    return uuid.uuid4().hex


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Image:
    """Image entry attached to a variant."""

    file_name: str = ""
    cdn_link: Optional[str] = None
    i: int = 0
    alt: Optional[str] = None


@dataclass
class Variant:
    """A purchasable unit of a Product.

    Variants are owned by their Product and are only ever stored embedded
    in the product document. ``cost`` and ``price`` hold the raw feed values.
    """

    id: str = field(default_factory=new_id)
    available: bool = True
    attributes: Dict[str, Any] = field(default_factory=dict)
    cost: Optional[str] = None
    price: Optional[str] = None
    currency: str = "USD"

    # Physical dimensions (not present in the feed)
    depth: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    dimension_uom: Optional[str] = None
    volume: Optional[float] = None
    volume_uom: Optional[str] = None
    weight: Optional[float] = None
    weight_uom: Optional[str] = None

    manufacturer_item_code: Optional[str] = None
    packaging: str = ""
    description: Optional[str] = None
    sku: Optional[str] = None
    active: bool = True
    images: List[Image] = field(default_factory=list)
    item_code: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Variant":
        data = dict(doc)
        data["images"] = [Image(**image) for image in data.get("images") or []]
        return cls(**data)


@dataclass
class Product:
    """Canonical catalog entity stored as one document.

    ``id`` is assigned once at creation. ``enriched`` starts False and is
    flipped to True only when a generated description has been applied.
    ``availability`` guards deletion: unavailable products cannot be deleted.
    """

    name: str = ""
    type: str = ""
    short_description: str = ""
    description: str = ""
    vendor_id: str = ""
    manufacturer_id: str = ""
    storefront_price_visibility: str = ""
    category_name: str = ""
    product_id: str = ""
    variants: List[Variant] = field(default_factory=list)
    enriched: bool = False

    availability: bool = True
    deleted: bool = False
    published: str = "published"
    is_taxable: bool = True
    is_fragile: bool = False
    quantity_on_hand: int = 0
    options: List[Any] = field(default_factory=list)

    id: str = field(default_factory=new_id)
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    def to_document(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dict for the document store."""
        return asdict(self)

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Product":
        """Build a Product from a stored document."""
        data = dict(doc)
        data["variants"] = [Variant.from_document(v) for v in data.get("variants") or []]
        return cls(**data)
