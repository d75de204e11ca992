from abc import ABC, abstractmethod
from uuid import UUID

from listing_wizard.domain.entities.variation import Variation


class VariationRepository(ABC):
    """Port for a listing's variation set. Writes are whole-set only."""

    @abstractmethod
    async def list_for_listing(self, listing_id: UUID) -> list[Variation]:
        ...

    @abstractmethod
    async def delete_for_listing(self, listing_id: UUID) -> int:
        """Delete every variation of the listing and return how many were removed."""
        ...

    @abstractmethod
    async def add_many(self, variations: list[Variation]) -> None:
        ...
