from abc import ABC, abstractmethod
from uuid import UUID

from listing_wizard.domain.entities.media_asset import ListingImage


class ListingImageRepository(ABC):
    """Port for a listing's gallery images."""

    @abstractmethod
    async def list_for_listing(self, listing_id: UUID) -> list[ListingImage]:
        """Return the gallery ordered by position."""
        ...

    @abstractmethod
    async def delete_for_listing(self, listing_id: UUID) -> int:
        ...

    @abstractmethod
    async def add_many(self, images: list[ListingImage]) -> None:
        ...

    @abstractmethod
    async def primary_urls(self, listing_ids: list[UUID]) -> dict[UUID, str]:
        """Map each listing id to its primary image URL (or first image if none is primary)."""
        ...
