from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from listing_wizard.domain.entities.media_asset import MediaAsset


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Variation:
    """
    One purchasable color/size/edition combination of a listing.

    The whole set for a listing is replaced as a batch; there is no per-variation update.
    """

    listing_id: UUID
    sku: str
    color: str | None = None
    size: str | None = None
    edition: str | None = None
    product_id_value: str | None = None
    product_id_type: str | None = None
    price: Decimal | None = None
    quantity: int = 0
    condition: str | None = None
    image: MediaAsset | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utcnow)
