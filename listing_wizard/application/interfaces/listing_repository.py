from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import UUID

from listing_wizard.domain.entities.listing import Listing
from listing_wizard.domain.enums.listing_status import ListingStatus

SORTABLE_FIELDS: frozenset[str] = frozenset(
    {"created_at", "updated_at", "name", "price", "quantity"}
)


@dataclass
class ListingQuery:
    owner_id: UUID | None = None
    status: ListingStatus | None = None
    category: str | None = None
    search: str | None = None
    sort_by: str = "created_at"
    descending: bool = True
    limit: int = 10
    offset: int = 0


class ListingRepository(ABC):
    """Port for persisting and querying Listing aggregates."""

    @abstractmethod
    async def save(self, listing: Listing) -> None:
        """Insert or update. Raises SkuConflictError if the SKU is taken at storage level."""
        ...

    @abstractmethod
    async def get_by_id(self, listing_id: UUID) -> Listing | None:
        ...

    async def get_owned(self, listing_id: UUID, owner_id: UUID) -> Listing | None:
        listing = await self.get_by_id(listing_id)
        if listing is None or listing.owner_id != owner_id:
            return None
        return listing

    @abstractmethod
    async def find_id_by_sku(
        self, seller_sku: str, *, exclude_listing_id: UUID | None = None
    ) -> UUID | None:
        ...

    @abstractmethod
    async def product_identifier_exists(self, product_identifier: str) -> bool:
        ...

    @abstractmethod
    async def delete(self, listing_id: UUID) -> None:
        ...

    @abstractmethod
    async def list_all(self, query: ListingQuery) -> tuple[list[Listing], int]:
        """Return (listings, total_count)."""
        ...
