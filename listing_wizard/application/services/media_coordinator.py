from dataclasses import dataclass
from uuid import UUID

import structlog

from listing_wizard.application.interfaces.asset_store import AssetStore, UploadedFile
from listing_wizard.application.services.media_cleanup import purge_media
from listing_wizard.domain.entities.media_asset import MediaAsset
from listing_wizard.domain.exceptions import (
    AssetStoreError,
    ListingValidationError,
    MediaCleanupError,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class UploadPolicy:
    max_upload_bytes: int = 5 * 1024 * 1024
    allowed_content_types: frozenset[str] = frozenset(
        {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
    )
    max_gallery_images: int = 6
    max_files_per_request: int = 10


class MediaCoordinator:
    """Validates seller uploads, pushes them to the asset store, and purges replaced media."""

    def __init__(self, asset_store: AssetStore, policy: UploadPolicy | None = None) -> None:
        self._asset_store = asset_store
        self.policy = policy or UploadPolicy()

    def validate(self, files: list[UploadedFile], *, max_files: int) -> None:
        if len(files) > max_files:
            raise ListingValidationError(
                f"At most {max_files} images may be uploaded at once", fields=["images"]
            )
        for file in files:
            name = file.filename or "upload"
            if file.size == 0:
                raise ListingValidationError(f"File {name} is empty", fields=["images"])
            if file.size > self.policy.max_upload_bytes:
                raise ListingValidationError(
                    f"File {name} exceeds {self.policy.max_upload_bytes} bytes", fields=["images"]
                )
            content_type = (file.content_type or "").split(";")[0].strip().lower()
            if content_type not in self.policy.allowed_content_types:
                raise ListingValidationError(
                    f"Only image files are allowed (jpeg, jpg, png, gif, webp): {name}",
                    fields=["images"],
                )

    async def upload_all(self, files: list[UploadedFile], *, listing_id: UUID) -> list[MediaAsset]:
        """
        Upload every file in order. If one fails, the ones already stored in this
        call are removed again and AssetStoreError is raised.
        """
        stored: list[MediaAsset] = []
        for file in files:
            try:
                result = await self._asset_store.upload(file.data, file.content_type, file.filename)
            except AssetStoreError:
                logger.error(
                    "media_upload_failed",
                    listing_id=str(listing_id),
                    filename=file.filename,
                    uploaded_before_failure=len(stored),
                )
                await purge_media(
                    self._asset_store,
                    [asset.handle for asset in stored],
                    listing_id=listing_id,
                    reason="upload_rollback",
                )
                raise
            stored.append(
                MediaAsset(
                    handle=result.handle,
                    url=result.url,
                    original_name=file.filename,
                    size=file.size,
                    mime_type=file.content_type,
                )
            )
        return stored

    async def purge(
        self, assets: list[MediaAsset], *, listing_id: UUID, reason: str
    ) -> list[MediaCleanupError]:
        """Best-effort delete of the given assets; failures are logged and returned."""
        return await purge_media(
            self._asset_store,
            [asset.handle for asset in assets],
            listing_id=listing_id,
            reason=reason,
        )
