from enum import Enum


class ListingStatus(str, Enum):
    """All possible statuses of a marketplace listing."""

    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"
    OUT_OF_STOCK = "out_of_stock"

    @property
    def is_published(self) -> bool:
        """Published listings have passed the finalizer at least once."""
        return self is not ListingStatus.DRAFT


# Statuses a seller may request through the status patch endpoint.
SELLER_SETTABLE_STATUSES: frozenset[ListingStatus] = frozenset(
    {ListingStatus.ACTIVE, ListingStatus.INACTIVE, ListingStatus.OUT_OF_STOCK}
)
