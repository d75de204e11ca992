from dataclasses import dataclass
from decimal import Decimal

import structlog

from listing_wizard.application.interfaces.asset_store import UploadedFile
from listing_wizard.application.interfaces.variation_repository import VariationRepository
from listing_wizard.application.services.media_coordinator import MediaCoordinator
from listing_wizard.domain.entities.listing import Listing, ensure_non_negative
from listing_wizard.domain.entities.media_asset import MediaAsset
from listing_wizard.domain.entities.variation import Variation
from listing_wizard.domain.exceptions import ListingValidationError
from listing_wizard.domain.services.identifiers import derive_variation_sku

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class VariationSpec:
    """One incoming variation as submitted by the seller."""

    color: str | None = None
    size: str | None = None
    edition: str | None = None
    sku: str | None = None
    product_id_value: str | None = None
    product_id_type: str | None = None
    price: Decimal | None = None
    quantity: int | None = None
    condition: str | None = None


@dataclass
class VariationReplaceResult:
    variations: list[Variation]
    removed_count: int
    cleanup_failures: int = 0

    @property
    def total(self) -> int:
        return len(self.variations)


class VariationSetManager:
    """
    Owns a listing's variation set and the media attached to it.

    A replace is truncate-and-insert, never a diff: purge old media (best effort),
    delete old records, insert the new batch. Uploads are paired with specs by
    position, so reordering either sequence independently is a caller bug.
    """

    def __init__(self, variation_repo: VariationRepository, media: MediaCoordinator) -> None:
        self._variation_repo = variation_repo
        self._media = media

    def validate(self, specs: list[VariationSpec], uploads: list[UploadedFile]) -> None:
        if not specs:
            raise ListingValidationError("At least one variation is required", fields=["variations"])
        if len(uploads) > len(specs):
            raise ListingValidationError(
                "More variation images than variations", fields=["images"]
            )
        for spec in specs:
            ensure_non_negative(price=spec.price, quantity=spec.quantity)
        self._media.validate(uploads, max_files=self._media.policy.max_files_per_request)

    async def replace_all(
        self,
        listing: Listing,
        specs: list[VariationSpec],
        uploads: list[UploadedFile] | None = None,
    ) -> VariationReplaceResult:
        uploads = uploads or []
        self.validate(specs, uploads)

        new_media = await self._media.upload_all(uploads, listing_id=listing.id)

        # From here on the step is committed: old media and records go first.
        existing = await self._variation_repo.list_for_listing(listing.id)
        failures = await self._media.purge(
            [v.image for v in existing if v.image is not None],
            listing_id=listing.id,
            reason="variation_replace",
        )
        removed = await self._variation_repo.delete_for_listing(listing.id)

        variations = self._build(listing, specs, new_media)
        await self._insert(listing, variations, new_media)

        logger.info(
            "variations_replaced",
            listing_id=str(listing.id),
            removed=removed,
            created=len(variations),
            cleanup_failures=len(failures),
        )
        return VariationReplaceResult(
            variations=variations, removed_count=removed, cleanup_failures=len(failures)
        )

    async def create_initial(
        self,
        listing: Listing,
        specs: list[VariationSpec],
        uploads: list[UploadedFile] | None = None,
    ) -> list[Variation]:
        """Insert the first variation set of a listing that has none yet."""
        uploads = uploads or []
        self.validate(specs, uploads)
        new_media = await self._media.upload_all(uploads, listing_id=listing.id)
        variations = self._build(listing, specs, new_media)
        await self._insert(listing, variations, new_media)
        return variations

    async def purge(self, listing: Listing) -> int:
        """Remove every variation and its media. Returns the number of media failures."""
        existing = await self._variation_repo.list_for_listing(listing.id)
        failures = await self._media.purge(
            [v.image for v in existing if v.image is not None],
            listing_id=listing.id,
            reason="listing_delete",
        )
        await self._variation_repo.delete_for_listing(listing.id)
        return len(failures)

    async def _insert(
        self, listing: Listing, variations: list[Variation], new_media: list[MediaAsset]
    ) -> None:
        try:
            await self._variation_repo.add_many(variations)
        except Exception:
            await self._media.purge(new_media, listing_id=listing.id, reason="variation_insert_failed")
            raise

    @staticmethod
    def _build(
        listing: Listing, specs: list[VariationSpec], media: list[MediaAsset]
    ) -> list[Variation]:
        variations = []
        for index, spec in enumerate(specs):
            sku = (spec.sku or "").strip() or derive_variation_sku(
                listing.product_identifier, spec.color, spec.size
            )
            variations.append(
                Variation(
                    listing_id=listing.id,
                    sku=sku,
                    color=spec.color,
                    size=spec.size,
                    edition=spec.edition,
                    product_id_value=spec.product_id_value,
                    product_id_type=spec.product_id_type,
                    price=spec.price,
                    quantity=spec.quantity or 0,
                    condition=spec.condition,
                    image=media[index] if index < len(media) else None,
                )
            )
        return variations
