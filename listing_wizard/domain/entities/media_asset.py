from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MediaAsset:
    """A blob held by the asset store plus the metadata captured at upload time."""

    handle: str
    url: str
    original_name: str = ""
    size: int = 0
    mime_type: str = ""


@dataclass
class ListingImage:
    """One entry of a listing's ordered gallery."""

    listing_id: UUID
    media: MediaAsset
    order: int = 0
    is_primary: bool = False
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utcnow)
