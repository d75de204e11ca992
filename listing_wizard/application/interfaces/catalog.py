from abc import ABC, abstractmethod


class CatalogLookup(ABC):
    """Port for the category catalog owned by another service."""

    @abstractmethod
    async def ensure_active(self, category: str, subcategory: str) -> None:
        """
        Raise ListingValidationError if the category/subcategory pair is unknown
        or inactive, CatalogUnavailableError if the catalog cannot be reached.
        """
        ...
