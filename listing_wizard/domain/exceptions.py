"""
Error taxonomy for the listing core.

Everything except MediaCleanupError is surfaced to the caller; the API layer
maps each class to an HTTP status code.
"""
from uuid import UUID


class ListingError(Exception):
    """Base class for all listing-core errors."""


class ListingValidationError(ListingError):
    """A required field is missing or a value is out of range. Nothing was written."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        self.fields = fields or []
        super().__init__(message)


class ConflictError(ListingError):
    """A uniqueness rule would be violated. Nothing was written."""


class SkuConflictError(ConflictError):
    def __init__(self, sku: str) -> None:
        self.sku = sku
        super().__init__(f"SKU already exists: {sku}")


class ProductIdentifierConflictError(ConflictError):
    def __init__(self, product_identifier: str) -> None:
        self.product_identifier = product_identifier
        super().__init__(f"Product identifier already exists: {product_identifier}")


class ListingNotFoundError(ListingError):
    def __init__(self, listing_id: UUID) -> None:
        self.listing_id = listing_id
        super().__init__(f"Listing {listing_id} not found.")


class AssetStoreError(ListingError):
    """The object store rejected or failed an upload or delete."""


class MediaCleanupError(ListingError):
    """
    A best-effort delete of an old media handle failed.

    Collected and logged by the media cleanup fan-out; never raised to callers.
    """

    def __init__(self, handle: str, cause: Exception) -> None:
        self.handle = handle
        self.cause = cause
        super().__init__(f"Failed to delete media {handle}: {cause}")


class CatalogUnavailableError(ListingError):
    """The category catalog could not be reached."""
