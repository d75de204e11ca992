from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

import structlog

from listing_wizard.application.interfaces.asset_store import UploadedFile
from listing_wizard.application.interfaces.event_publisher import EventPublisher
from listing_wizard.application.interfaces.listing_repository import ListingRepository
from listing_wizard.application.services.gallery_manager import GalleryManager
from listing_wizard.domain.entities.listing import UPDATABLE_FIELDS, Listing
from listing_wizard.domain.entities.media_asset import ListingImage
from listing_wizard.domain.enums.listing_status import ListingStatus
from listing_wizard.domain.exceptions import ListingNotFoundError

logger = structlog.get_logger(__name__)


@dataclass
class UpdateListingInput:
    listing_id: UUID
    owner_id: UUID
    changes: dict[str, Any]
    uploads: list[UploadedFile] = field(default_factory=list)


@dataclass
class UpdateListingOutput:
    listing: Listing
    applied_fields: list[str]
    added_images: list[ListingImage]


class UpdateListing:
    """
    Use case: post-publish edit of the allow-listed fields.

    New uploads are appended to the gallery; existing media is never removed here.
    """

    def __init__(
        self,
        listing_repo: ListingRepository,
        gallery: GalleryManager,
        event_publisher: EventPublisher,
    ) -> None:
        self._listing_repo = listing_repo
        self._gallery = gallery
        self._event_publisher = event_publisher

    async def execute(self, input_data: UpdateListingInput) -> UpdateListingOutput:
        listing = await self._listing_repo.get_owned(input_data.listing_id, input_data.owner_id)
        if listing is None:
            raise ListingNotFoundError(input_data.listing_id)

        ignored = sorted(set(input_data.changes) - UPDATABLE_FIELDS)
        if ignored:
            logger.info("listing_update_fields_ignored", listing_id=str(listing.id), fields=ignored)

        applied = listing.update_fields(input_data.changes)
        added = await self._gallery.append_only(listing.id, input_data.uploads)

        await self._listing_repo.save(listing)
        await self._event_publisher.publish_many(listing.collect_events())

        logger.info(
            "listing_updated",
            listing_id=str(listing.id),
            fields=applied,
            images_added=len(added),
        )
        return UpdateListingOutput(listing=listing, applied_fields=applied, added_images=added)


@dataclass
class UpdateListingStatusOutput:
    listing_id: UUID
    from_status: ListingStatus
    to_status: ListingStatus


class UpdateListingStatus:
    """Use case: seller status patch, restricted to active / inactive / out_of_stock."""

    def __init__(self, listing_repo: ListingRepository, event_publisher: EventPublisher) -> None:
        self._listing_repo = listing_repo
        self._event_publisher = event_publisher

    async def execute(
        self, listing_id: UUID, owner_id: UUID, status: ListingStatus
    ) -> UpdateListingStatusOutput:
        listing = await self._listing_repo.get_owned(listing_id, owner_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)

        # May raise ListingValidationError / InvalidStatusTransitionError
        from_status = listing.change_status(status)

        await self._listing_repo.save(listing)
        await self._event_publisher.publish_many(listing.collect_events())

        logger.info(
            "listing_status_updated",
            listing_id=str(listing.id),
            from_status=from_status.value,
            to_status=status.value,
        )
        return UpdateListingStatusOutput(
            listing_id=listing.id, from_status=from_status, to_status=listing.status
        )
