from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from listing_wizard.domain.enums.listing_status import ListingStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ListingDraftCreatedEvent(DomainEvent):
    """Published when a seller starts a new listing at step 1."""

    listing_id: UUID = field(default_factory=uuid4)
    owner_id: UUID = field(default_factory=uuid4)
    product_identifier: str = ""
    category: str = ""
    subcategory: str = ""


@dataclass(frozen=True)
class ListingPublishedEvent(DomainEvent):
    """Published when a draft becomes active for the first time."""

    listing_id: UUID = field(default_factory=uuid4)
    owner_id: UUID = field(default_factory=uuid4)
    product_identifier: str = ""
    seller_sku: str = ""


@dataclass(frozen=True)
class ListingStatusChangedEvent(DomainEvent):
    """Published whenever a listing moves between statuses."""

    listing_id: UUID = field(default_factory=uuid4)
    from_status: ListingStatus | None = None
    to_status: ListingStatus = ListingStatus.DRAFT


@dataclass(frozen=True)
class ListingDeletedEvent(DomainEvent):
    """Published after a listing and its media have been removed."""

    listing_id: UUID = field(default_factory=uuid4)
    owner_id: UUID = field(default_factory=uuid4)
    product_identifier: str = ""
    orphaned_media: int = 0
