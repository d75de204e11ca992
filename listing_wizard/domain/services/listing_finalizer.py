from datetime import datetime, timezone

import structlog

from listing_wizard.domain.entities.listing import Listing
from listing_wizard.domain.enums.listing_status import ListingStatus
from listing_wizard.domain.exceptions import ListingValidationError

logger = structlog.get_logger(__name__)

# Everything required somewhere across steps 1 to 6.
REQUIRED_FIELDS: tuple[str, ...] = (
    "name",
    "category",
    "subcategory",
    "seller_sku",
    "price",
    "quantity",
    "condition",
    "fulfillment_channel",
    "description",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ListingFinalizer:
    """Owns the draft to active edge for both the stepwise and the one-shot paths."""

    def missing_fields(self, listing: Listing) -> list[str]:
        values = {
            "name": listing.name,
            "category": listing.category,
            "subcategory": listing.subcategory,
            "seller_sku": None if listing.has_placeholder_sku else listing.seller_sku,
            "price": listing.pricing.price,
            "quantity": listing.quantity,
            "condition": listing.condition,
            "fulfillment_channel": listing.fulfillment_channel,
            "description": listing.description,
        }
        return [
            name
            for name in REQUIRED_FIELDS
            if values[name] is None or (isinstance(values[name], str) and not values[name].strip())
        ]

    def finalize(self, listing: Listing) -> None:
        """Validate completeness, stamp completed_at once, and activate the listing."""
        missing = self.missing_fields(listing)
        if missing:
            raise ListingValidationError(
                f"Listing is incomplete, missing: {', '.join(missing)}", fields=missing
            )

        if listing.completed_at is None:
            listing.completed_at = _utcnow()
        listing.transition_to(ListingStatus.ACTIVE)

        logger.info(
            "listing_finalized",
            listing_id=str(listing.id),
            product_identifier=listing.product_identifier,
        )
