from uuid import UUID

import structlog

from listing_wizard.application.interfaces.asset_store import UploadedFile
from listing_wizard.application.interfaces.listing_image_repository import ListingImageRepository
from listing_wizard.application.services.media_coordinator import MediaCoordinator
from listing_wizard.domain.entities.media_asset import ListingImage, MediaAsset
from listing_wizard.domain.exceptions import ListingValidationError

logger = structlog.get_logger(__name__)


class GalleryManager:
    """Owns a listing's general (non-variation) image set."""

    def __init__(self, image_repo: ListingImageRepository, media: MediaCoordinator) -> None:
        self._image_repo = image_repo
        self._media = media

    def validate(self, uploads: list[UploadedFile], *, require_uploads: bool = True) -> None:
        if require_uploads and not uploads:
            raise ListingValidationError("At least one image is required", fields=["images"])
        self._media.validate(uploads, max_files=self._media.policy.max_gallery_images)

    async def replace_all(
        self,
        listing_id: UUID,
        uploads: list[UploadedFile],
        *,
        require_uploads: bool = True,
    ) -> list[ListingImage]:
        """Swap the whole gallery for the uploads; the first upload becomes primary."""
        self.validate(uploads, require_uploads=require_uploads)
        new_media = await self._media.upload_all(uploads, listing_id=listing_id)

        existing = await self._image_repo.list_for_listing(listing_id)
        failures = await self._media.purge(
            [image.media for image in existing],
            listing_id=listing_id,
            reason="gallery_replace",
        )
        await self._image_repo.delete_for_listing(listing_id)

        images = [
            ListingImage(listing_id=listing_id, media=media, order=index, is_primary=index == 0)
            for index, media in enumerate(new_media)
        ]
        await self._insert(listing_id, images, new_media)

        logger.info(
            "gallery_replaced",
            listing_id=str(listing_id),
            removed=len(existing),
            created=len(images),
            cleanup_failures=len(failures),
        )
        return images

    async def create_initial(self, listing_id: UUID, uploads: list[UploadedFile]) -> list[ListingImage]:
        """Insert the first gallery of a listing that has none yet. Zero uploads is allowed."""
        self.validate(uploads, require_uploads=False)
        new_media = await self._media.upload_all(uploads, listing_id=listing_id)
        images = [
            ListingImage(listing_id=listing_id, media=media, order=index, is_primary=index == 0)
            for index, media in enumerate(new_media)
        ]
        await self._insert(listing_id, images, new_media)
        return images

    async def append_only(self, listing_id: UUID, uploads: list[UploadedFile]) -> list[ListingImage]:
        """Add images after the current ones without touching existing media."""
        if not uploads:
            return []
        self._media.validate(uploads, max_files=self._media.policy.max_files_per_request)
        new_media = await self._media.upload_all(uploads, listing_id=listing_id)

        existing = await self._image_repo.list_for_listing(listing_id)
        next_order = max((image.order for image in existing), default=-1) + 1
        has_primary = any(image.is_primary for image in existing)

        images = [
            ListingImage(
                listing_id=listing_id,
                media=media,
                order=next_order + offset,
                is_primary=not has_primary and offset == 0,
            )
            for offset, media in enumerate(new_media)
        ]
        await self._insert(listing_id, images, new_media)

        logger.info("gallery_appended", listing_id=str(listing_id), created=len(images))
        return images

    async def purge(self, listing_id: UUID) -> int:
        """Remove every gallery image and its media. Returns the number of media failures."""
        existing = await self._image_repo.list_for_listing(listing_id)
        failures = await self._media.purge(
            [image.media for image in existing],
            listing_id=listing_id,
            reason="listing_delete",
        )
        await self._image_repo.delete_for_listing(listing_id)
        return len(failures)

    async def _insert(
        self, listing_id: UUID, images: list[ListingImage], new_media: list[MediaAsset]
    ) -> None:
        if not images:
            return
        try:
            await self._image_repo.add_many(images)
        except Exception:
            await self._media.purge(new_media, listing_id=listing_id, reason="gallery_insert_failed")
            raise
