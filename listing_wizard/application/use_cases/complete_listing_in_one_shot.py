from dataclasses import dataclass, field
from uuid import UUID

import structlog

from listing_wizard.application.interfaces.asset_store import UploadedFile
from listing_wizard.application.interfaces.catalog import CatalogLookup
from listing_wizard.application.interfaces.event_publisher import EventPublisher
from listing_wizard.application.interfaces.listing_repository import ListingRepository
from listing_wizard.application.services.gallery_manager import GalleryManager
from listing_wizard.application.services.media_coordinator import MediaCoordinator
from listing_wizard.application.services.sku_registry import SkuRegistry
from listing_wizard.application.services.variation_set_manager import (
    VariationSetManager,
    VariationSpec,
)
from listing_wizard.application.use_cases.listing_draft_workflow import allocate_product_identifier
from listing_wizard.domain.entities.listing import Listing, ListingDetails, Offer
from listing_wizard.domain.entities.media_asset import ListingImage
from listing_wizard.domain.entities.variation import Variation
from listing_wizard.domain.exceptions import ListingValidationError
from listing_wizard.domain.services.listing_finalizer import REQUIRED_FIELDS, ListingFinalizer

logger = structlog.get_logger(__name__)


@dataclass
class CompleteListingInput:
    owner_id: UUID
    details: ListingDetails
    offer: Offer
    description: str | None
    bullet_points: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    variation_types: list[str] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)
    sizes: list[str] = field(default_factory=list)
    editions: list[str] = field(default_factory=list)
    variations: list[VariationSpec] = field(default_factory=list)
    variation_uploads: list[UploadedFile] = field(default_factory=list)
    gallery_uploads: list[UploadedFile] = field(default_factory=list)


@dataclass
class CompleteListingOutput:
    listing: Listing
    variations: list[Variation]
    images: list[ListingImage]


def _missing_fields(input_data: CompleteListingInput) -> list[str]:
    values = {
        "name": input_data.details.name,
        "category": input_data.details.category,
        "subcategory": input_data.details.subcategory,
        "seller_sku": input_data.offer.seller_sku,
        "price": input_data.offer.price,
        "quantity": input_data.offer.quantity,
        "condition": input_data.offer.condition,
        "fulfillment_channel": input_data.offer.fulfillment_channel,
        "description": input_data.description,
    }
    return [
        name
        for name in REQUIRED_FIELDS
        if values[name] is None or (isinstance(values[name], str) and not values[name].strip())
    ]


class CompleteListingInOneShot:
    """
    Use case: run all seven wizard steps in a single call.

    Every field, the catalog placement and the SKU are checked before the first
    write. Variations and gallery images are created directly on the new listing;
    zero of either is accepted. If a write fails after media was uploaded, that
    media is purged again before the error propagates.
    """

    def __init__(
        self,
        listing_repo: ListingRepository,
        sku_registry: SkuRegistry,
        variations: VariationSetManager,
        gallery: GalleryManager,
        media: MediaCoordinator,
        catalog: CatalogLookup,
        event_publisher: EventPublisher,
        finalizer: ListingFinalizer | None = None,
        product_identifier_attempts: int = 5,
    ) -> None:
        self._listing_repo = listing_repo
        self._sku_registry = sku_registry
        self._variations = variations
        self._gallery = gallery
        self._media = media
        self._catalog = catalog
        self._event_publisher = event_publisher
        self._finalizer = finalizer or ListingFinalizer()
        self._product_identifier_attempts = product_identifier_attempts

    async def execute(self, input_data: CompleteListingInput) -> CompleteListingOutput:
        missing = _missing_fields(input_data)
        if missing:
            raise ListingValidationError(
                f"Missing required fields: {', '.join(missing)}", fields=missing
            )

        input_data.details.validate()
        input_data.offer.validate()
        if input_data.variations:
            self._variations.validate(input_data.variations, input_data.variation_uploads)
        elif input_data.variation_uploads:
            raise ListingValidationError(
                "Variation images were sent without variations", fields=["variation_images"]
            )
        self._gallery.validate(input_data.gallery_uploads, require_uploads=False)

        await self._catalog.ensure_active(input_data.details.category, input_data.details.subcategory)
        seller_sku = input_data.offer.seller_sku.strip()
        await self._sku_registry.ensure_unique(seller_sku)
        product_identifier = await allocate_product_identifier(
            self._listing_repo,
            input_data.details.product_identifier,
            attempts=self._product_identifier_attempts,
        )

        listing = Listing.start_draft(
            owner_id=input_data.owner_id,
            product_identifier=product_identifier,
            details=input_data.details,
        )
        listing.set_variation_types(
            input_data.variation_types,
            colors=input_data.colors,
            sizes=input_data.sizes,
            editions=input_data.editions,
        )
        listing.apply_offer(input_data.offer)
        listing.apply_description(input_data.description or "", input_data.bullet_points)
        listing.apply_keywords(input_data.keywords)
        self._finalizer.finalize(listing)

        variations: list[Variation] = []
        try:
            await self._listing_repo.save(listing)
            if input_data.variations:
                variations = await self._variations.create_initial(
                    listing, input_data.variations, input_data.variation_uploads
                )
            images = await self._gallery.create_initial(listing.id, input_data.gallery_uploads)
        except Exception:
            await self._media.purge(
                [v.image for v in variations if v.image is not None],
                listing_id=listing.id,
                reason="one_shot_rollback",
            )
            raise

        await self._event_publisher.publish_many(listing.collect_events())

        logger.info(
            "listing_completed_in_one_shot",
            listing_id=str(listing.id),
            product_identifier=listing.product_identifier,
            variations=len(variations),
            images=len(images),
        )
        return CompleteListingOutput(listing=listing, variations=variations, images=images)
