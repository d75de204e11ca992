from uuid import UUID

import structlog

from listing_wizard.application.interfaces.listing_repository import ListingRepository
from listing_wizard.domain.exceptions import SkuConflictError

logger = structlog.get_logger(__name__)


class SkuRegistry:
    """
    Application-level check that no other listing holds a seller SKU.

    The check is not atomic with the write that follows; the unique index on
    listings.seller_sku is the hard guarantee and the repository converts its
    violation into the same SkuConflictError.
    """

    def __init__(self, listing_repo: ListingRepository) -> None:
        self._listing_repo = listing_repo

    async def ensure_unique(self, seller_sku: str, *, exclude_listing_id: UUID | None = None) -> None:
        holder = await self._listing_repo.find_id_by_sku(
            seller_sku, exclude_listing_id=exclude_listing_id
        )
        if holder is not None:
            logger.info(
                "sku_conflict",
                seller_sku=seller_sku,
                held_by=str(holder),
                requested_for=str(exclude_listing_id) if exclude_listing_id else None,
            )
            raise SkuConflictError(seller_sku)
