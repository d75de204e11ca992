from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from listing_wizard.application.interfaces.listing_image_repository import ListingImageRepository
from listing_wizard.domain.entities.media_asset import ListingImage, MediaAsset
from listing_wizard.infrastructure.database.models import ListingImageModel


def _to_domain(model: ListingImageModel) -> ListingImage:
    return ListingImage(
        id=model.id,
        listing_id=model.listing_id,
        media=MediaAsset(
            handle=model.handle,
            url=model.url,
            original_name=model.original_name or "",
            size=model.size or 0,
            mime_type=model.mime_type or "",
        ),
        order=model.position,
        is_primary=model.is_primary,
        created_at=model.created_at,
    )


def _to_model(image: ListingImage) -> ListingImageModel:
    return ListingImageModel(
        id=image.id,
        listing_id=image.listing_id,
        handle=image.media.handle,
        url=image.media.url,
        original_name=image.media.original_name,
        size=image.media.size,
        mime_type=image.media.mime_type,
        position=image.order,
        is_primary=image.is_primary,
        created_at=image.created_at,
    )


class SqlAlchemyListingImageRepository(ListingImageRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_listing(self, listing_id: UUID) -> list[ListingImage]:
        result = await self._session.execute(
            select(ListingImageModel)
            .where(ListingImageModel.listing_id == listing_id)
            .order_by(ListingImageModel.position)
        )
        return [_to_domain(m) for m in result.scalars().all()]

    async def delete_for_listing(self, listing_id: UUID) -> int:
        result = await self._session.execute(
            delete(ListingImageModel).where(ListingImageModel.listing_id == listing_id)
        )
        await self._session.flush()
        return result.rowcount or 0

    async def add_many(self, images: list[ListingImage]) -> None:
        self._session.add_all([_to_model(i) for i in images])
        await self._session.flush()

    async def primary_urls(self, listing_ids: list[UUID]) -> dict[UUID, str]:
        if not listing_ids:
            return {}
        result = await self._session.execute(
            select(ListingImageModel.listing_id, ListingImageModel.url)
            .where(ListingImageModel.listing_id.in_(listing_ids))
            # Primary first, then lowest position
            .order_by(
                ListingImageModel.listing_id,
                ListingImageModel.is_primary.desc(),
                ListingImageModel.position,
            )
        )
        urls: dict[UUID, str] = {}
        for listing_id, url in result.all():
            urls.setdefault(listing_id, url)
        return urls
