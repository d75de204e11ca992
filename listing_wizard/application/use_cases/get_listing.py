from dataclasses import dataclass
from uuid import UUID

from listing_wizard.application.interfaces.listing_image_repository import ListingImageRepository
from listing_wizard.application.interfaces.listing_repository import ListingRepository
from listing_wizard.application.interfaces.variation_repository import VariationRepository
from listing_wizard.domain.entities.listing import Listing
from listing_wizard.domain.entities.media_asset import ListingImage
from listing_wizard.domain.entities.variation import Variation
from listing_wizard.domain.exceptions import ListingNotFoundError


@dataclass
class ListingView:
    listing: Listing
    variations: list[Variation]
    images: list[ListingImage]


class GetListing:
    """
    Use case: read a listing with its variations and gallery.

    Reads are not isolated from a concurrent replace, so either set may be
    transiently empty.
    """

    def __init__(
        self,
        listing_repo: ListingRepository,
        variation_repo: VariationRepository,
        image_repo: ListingImageRepository,
    ) -> None:
        self._listing_repo = listing_repo
        self._variation_repo = variation_repo
        self._image_repo = image_repo

    async def execute(self, listing_id: UUID) -> ListingView:
        listing = await self._listing_repo.get_by_id(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)

        variations = await self._variation_repo.list_for_listing(listing_id)
        images = await self._image_repo.list_for_listing(listing_id)
        return ListingView(listing=listing, variations=variations, images=images)
