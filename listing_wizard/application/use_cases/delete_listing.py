from dataclasses import dataclass
from uuid import UUID

import structlog

from listing_wizard.application.interfaces.event_publisher import EventPublisher
from listing_wizard.application.interfaces.listing_repository import ListingRepository
from listing_wizard.application.services.gallery_manager import GalleryManager
from listing_wizard.application.services.variation_set_manager import VariationSetManager
from listing_wizard.domain.events.domain_events import ListingDeletedEvent
from listing_wizard.domain.exceptions import ListingNotFoundError

logger = structlog.get_logger(__name__)


@dataclass
class DeleteListingOutput:
    listing_id: UUID
    media_cleanup_failures: int


class DeleteListing:
    """
    Use case: hard-delete a listing and reclaim every media handle it owns.

    Media deletes are best effort; a failed one is logged and the record
    deletes still go ahead.
    """

    def __init__(
        self,
        listing_repo: ListingRepository,
        variations: VariationSetManager,
        gallery: GalleryManager,
        event_publisher: EventPublisher,
    ) -> None:
        self._listing_repo = listing_repo
        self._variations = variations
        self._gallery = gallery
        self._event_publisher = event_publisher

    async def execute(self, listing_id: UUID, owner_id: UUID) -> DeleteListingOutput:
        listing = await self._listing_repo.get_owned(listing_id, owner_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)

        failures = await self._variations.purge(listing)
        failures += await self._gallery.purge(listing.id)
        await self._listing_repo.delete(listing.id)

        listing.record_event(
            ListingDeletedEvent(
                listing_id=listing.id,
                owner_id=listing.owner_id,
                product_identifier=listing.product_identifier,
                orphaned_media=failures,
            )
        )
        await self._event_publisher.publish_many(listing.collect_events())

        if failures:
            logger.warning(
                "listing_deleted_with_orphaned_media",
                listing_id=str(listing.id),
                orphaned_media=failures,
            )
        else:
            logger.info("listing_deleted", listing_id=str(listing.id))
        return DeleteListingOutput(listing_id=listing.id, media_cleanup_failures=failures)
