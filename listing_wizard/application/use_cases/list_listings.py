import math
from dataclasses import dataclass
from uuid import UUID

from listing_wizard.application.interfaces.listing_image_repository import ListingImageRepository
from listing_wizard.application.interfaces.listing_repository import (
    SORTABLE_FIELDS,
    ListingQuery,
    ListingRepository,
)
from listing_wizard.domain.entities.listing import Listing
from listing_wizard.domain.enums.listing_status import ListingStatus
from listing_wizard.domain.exceptions import ListingValidationError


@dataclass
class ListListingsInput:
    owner_id: UUID
    status: ListingStatus | None = None
    category: str | None = None
    search: str | None = None
    sort_by: str = "created_at"
    order: str = "desc"
    page: int = 1
    limit: int = 10


@dataclass
class ListingSummary:
    listing: Listing
    primary_image_url: str | None


@dataclass
class ListingPage:
    items: list[ListingSummary]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


class ListListings:
    """Use case: page through the calling seller's listings."""

    def __init__(
        self, listing_repo: ListingRepository, image_repo: ListingImageRepository
    ) -> None:
        self._listing_repo = listing_repo
        self._image_repo = image_repo

    async def execute(self, input_data: ListListingsInput) -> ListingPage:
        if input_data.sort_by not in SORTABLE_FIELDS:
            raise ListingValidationError(
                f"Cannot sort by {input_data.sort_by}; choose one of {sorted(SORTABLE_FIELDS)}",
                fields=["sort_by"],
            )
        if input_data.order not in ("asc", "desc"):
            raise ListingValidationError("Order must be 'asc' or 'desc'", fields=["order"])
        if input_data.page < 1 or input_data.limit < 1:
            raise ListingValidationError("Page and limit must be positive", fields=["page", "limit"])

        listings, total = await self._listing_repo.list_all(
            ListingQuery(
                owner_id=input_data.owner_id,
                status=input_data.status,
                category=input_data.category,
                search=input_data.search.strip() if input_data.search else None,
                sort_by=input_data.sort_by,
                descending=input_data.order == "desc",
                limit=input_data.limit,
                offset=(input_data.page - 1) * input_data.limit,
            )
        )
        primary = await self._image_repo.primary_urls([listing.id for listing in listings])

        return ListingPage(
            items=[ListingSummary(listing=l, primary_image_url=primary.get(l.id)) for l in listings],
            total=total,
            page=input_data.page,
            limit=input_data.limit,
        )
