from dataclasses import dataclass
from uuid import UUID

import structlog

from listing_wizard.application.interfaces.asset_store import UploadedFile
from listing_wizard.application.interfaces.catalog import CatalogLookup
from listing_wizard.application.interfaces.event_publisher import EventPublisher
from listing_wizard.application.interfaces.listing_repository import ListingRepository
from listing_wizard.application.services.gallery_manager import GalleryManager
from listing_wizard.application.services.sku_registry import SkuRegistry
from listing_wizard.application.services.variation_set_manager import (
    VariationReplaceResult,
    VariationSetManager,
    VariationSpec,
)
from listing_wizard.domain.entities.listing import Listing, ListingDetails, Offer
from listing_wizard.domain.entities.media_asset import ListingImage
from listing_wizard.domain.enums.listing_status import ListingStatus
from listing_wizard.domain.exceptions import (
    ConflictError,
    ListingNotFoundError,
    ProductIdentifierConflictError,
)
from listing_wizard.domain.services.identifiers import generate_product_identifier
from listing_wizard.domain.services.listing_finalizer import ListingFinalizer

logger = structlog.get_logger(__name__)


@dataclass
class VariationStepOutput:
    listing: Listing
    result: VariationReplaceResult


@dataclass
class GalleryStepOutput:
    listing: Listing
    images: list[ListingImage]


async def allocate_product_identifier(
    listing_repo: ListingRepository,
    requested: str | None = None,
    *,
    attempts: int = 5,
) -> str:
    """
    Return a product identifier no listing holds yet.

    A seller-supplied identifier must be free; a generated one is re-rolled on
    collision up to `attempts` times.
    """
    if requested:
        if await listing_repo.product_identifier_exists(requested):
            raise ProductIdentifierConflictError(requested)
        return requested

    for attempt in range(1, attempts + 1):
        candidate = generate_product_identifier()
        if not await listing_repo.product_identifier_exists(candidate):
            return candidate
        logger.warning("product_identifier_collision", candidate=candidate, attempt=attempt)
    raise ConflictError(f"Could not allocate a unique product identifier after {attempts} attempts")


class ListingDraftWorkflow:
    """
    The seven wizard steps of listing creation.

    Every step after the first is scoped to (listing_id, owner_id) and raises
    ListingNotFoundError if the listing is absent or belongs to another seller.
    Steps may be called in any order and re-submitted; each overwrites only its
    own fields. Validation always completes before anything destructive happens.
    """

    def __init__(
        self,
        listing_repo: ListingRepository,
        sku_registry: SkuRegistry,
        variations: VariationSetManager,
        gallery: GalleryManager,
        catalog: CatalogLookup,
        event_publisher: EventPublisher,
        finalizer: ListingFinalizer | None = None,
        product_identifier_attempts: int = 5,
    ) -> None:
        self._listing_repo = listing_repo
        self._sku_registry = sku_registry
        self._variations = variations
        self._gallery = gallery
        self._catalog = catalog
        self._event_publisher = event_publisher
        self._finalizer = finalizer or ListingFinalizer()
        self._product_identifier_attempts = product_identifier_attempts

    async def _load(self, listing_id: UUID, owner_id: UUID) -> Listing:
        listing = await self._listing_repo.get_owned(listing_id, owner_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return listing

    async def _commit(self, listing: Listing, step: int) -> Listing:
        await self._listing_repo.save(listing)
        await self._event_publisher.publish_many(listing.collect_events())
        logger.info(
            "listing_step_saved",
            listing_id=str(listing.id),
            step=step,
            status=listing.status.value,
        )
        return listing

    # Step 1
    async def create_draft(self, owner_id: UUID, details: ListingDetails) -> Listing:
        details.validate()
        await self._catalog.ensure_active(details.category, details.subcategory)
        product_identifier = await allocate_product_identifier(
            self._listing_repo,
            details.product_identifier,
            attempts=self._product_identifier_attempts,
        )
        listing = Listing.start_draft(
            owner_id=owner_id,
            product_identifier=product_identifier,
            details=details,
        )
        return await self._commit(listing, step=1)

    # Step 2
    async def set_variation_types(
        self,
        listing_id: UUID,
        owner_id: UUID,
        variation_types: list[str],
        *,
        colors: list[str] | None = None,
        sizes: list[str] | None = None,
        editions: list[str] | None = None,
    ) -> Listing:
        listing = await self._load(listing_id, owner_id)
        listing.set_variation_types(variation_types, colors=colors, sizes=sizes, editions=editions)
        return await self._commit(listing, step=2)

    # Step 3
    async def set_variations(
        self,
        listing_id: UUID,
        owner_id: UUID,
        specs: list[VariationSpec],
        uploads: list[UploadedFile] | None = None,
    ) -> VariationStepOutput:
        listing = await self._load(listing_id, owner_id)
        result = await self._variations.replace_all(listing, specs, uploads or [])
        listing.advance_to(3)
        await self._commit(listing, step=3)
        return VariationStepOutput(listing=listing, result=result)

    # Step 4
    async def set_offer(self, listing_id: UUID, owner_id: UUID, offer: Offer) -> Listing:
        listing = await self._load(listing_id, owner_id)
        offer.validate()
        await self._sku_registry.ensure_unique(offer.seller_sku.strip(), exclude_listing_id=listing.id)
        listing.apply_offer(offer)
        return await self._commit(listing, step=4)

    # Step 5
    async def set_gallery(
        self, listing_id: UUID, owner_id: UUID, uploads: list[UploadedFile]
    ) -> GalleryStepOutput:
        listing = await self._load(listing_id, owner_id)
        images = await self._gallery.replace_all(listing.id, uploads)
        listing.advance_to(5)
        await self._commit(listing, step=5)
        return GalleryStepOutput(listing=listing, images=images)

    # Step 6
    async def set_description(
        self,
        listing_id: UUID,
        owner_id: UUID,
        description: str,
        bullet_points: list[str] | None = None,
    ) -> Listing:
        listing = await self._load(listing_id, owner_id)
        listing.apply_description(description, bullet_points)
        return await self._commit(listing, step=6)

    # Step 7
    async def set_keywords_and_publish(
        self, listing_id: UUID, owner_id: UUID, keywords: list[str] | None
    ) -> Listing:
        listing = await self._load(listing_id, owner_id)
        listing.apply_keywords(keywords)
        if listing.status is ListingStatus.DRAFT:
            self._finalizer.finalize(listing)
        return await self._commit(listing, step=7)
