from listing_wizard.domain.enums.listing_status import ListingStatus
from listing_wizard.domain.exceptions import ListingValidationError


# Mapping of valid transitions: from_status -> set of allowed to_statuses
VALID_TRANSITIONS: dict[ListingStatus, frozenset[ListingStatus]] = {
    # Only the finalizer takes a draft live
    ListingStatus.DRAFT: frozenset({ListingStatus.ACTIVE}),
    ListingStatus.ACTIVE: frozenset({ListingStatus.INACTIVE, ListingStatus.OUT_OF_STOCK}),
    ListingStatus.INACTIVE: frozenset({ListingStatus.ACTIVE}),
    ListingStatus.OUT_OF_STOCK: frozenset({ListingStatus.ACTIVE}),
}


class InvalidStatusTransitionError(ListingValidationError):
    """Raised when an invalid status transition is attempted."""

    def __init__(self, from_status: ListingStatus, to_status: ListingStatus) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid transition from {from_status.value} to {to_status.value}. "
            f"Allowed transitions: {sorted(s.value for s in VALID_TRANSITIONS.get(from_status, frozenset()))}",
            fields=["status"],
        )


class ListingStatusMachine:
    """
    Validates status transitions for a listing.

    Stateless. Call can_transition() or validate_transition() with explicit statuses.
    Re-applying the current status is always allowed and treated as a no-op by callers.
    """

    def can_transition(self, from_status: ListingStatus, to_status: ListingStatus) -> bool:
        """Return True if moving from_status to to_status is permitted."""
        if from_status == to_status:
            return True
        return to_status in VALID_TRANSITIONS.get(from_status, frozenset())

    def validate_transition(self, from_status: ListingStatus, to_status: ListingStatus) -> None:
        """Raise InvalidStatusTransitionError if the transition is not permitted."""
        if not self.can_transition(from_status, to_status):
            raise InvalidStatusTransitionError(from_status, to_status)

    def get_allowed_transitions(self, from_status: ListingStatus) -> frozenset[ListingStatus]:
        """Return the set of statuses reachable from from_status."""
        return VALID_TRANSITIONS.get(from_status, frozenset())
