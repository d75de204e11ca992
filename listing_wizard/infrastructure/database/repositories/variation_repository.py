from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from listing_wizard.application.interfaces.variation_repository import VariationRepository
from listing_wizard.domain.entities.media_asset import MediaAsset
from listing_wizard.domain.entities.variation import Variation
from listing_wizard.infrastructure.database.models import ListingVariationModel


def _to_domain(model: ListingVariationModel) -> Variation:
    image = None
    if model.image_handle:
        image = MediaAsset(
            handle=model.image_handle,
            url=model.image_url or "",
            original_name=model.image_original_name or "",
            size=model.image_size or 0,
            mime_type=model.image_mime_type or "",
        )
    return Variation(
        id=model.id,
        listing_id=model.listing_id,
        sku=model.sku,
        color=model.color,
        size=model.size,
        edition=model.edition,
        product_id_value=model.product_id_value,
        product_id_type=model.product_id_type,
        price=Decimal(str(model.price)) if model.price is not None else None,
        quantity=model.quantity,
        condition=model.condition,
        image=image,
        created_at=model.created_at,
    )


def _to_model(variation: Variation) -> ListingVariationModel:
    image = variation.image
    return ListingVariationModel(
        id=variation.id,
        listing_id=variation.listing_id,
        sku=variation.sku,
        color=variation.color,
        size=variation.size,
        edition=variation.edition,
        product_id_value=variation.product_id_value,
        product_id_type=variation.product_id_type,
        price=variation.price,
        quantity=variation.quantity,
        condition=variation.condition,
        image_handle=image.handle if image else None,
        image_url=image.url if image else None,
        image_original_name=image.original_name if image else None,
        image_size=image.size if image else None,
        image_mime_type=image.mime_type if image else None,
        created_at=variation.created_at,
    )


class SqlAlchemyVariationRepository(VariationRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_listing(self, listing_id: UUID) -> list[Variation]:
        result = await self._session.execute(
            select(ListingVariationModel)
            .where(ListingVariationModel.listing_id == listing_id)
            .order_by(ListingVariationModel.created_at, ListingVariationModel.sku)
        )
        return [_to_domain(m) for m in result.scalars().all()]

    async def delete_for_listing(self, listing_id: UUID) -> int:
        result = await self._session.execute(
            delete(ListingVariationModel).where(ListingVariationModel.listing_id == listing_id)
        )
        await self._session.flush()
        return result.rowcount or 0

    async def add_many(self, variations: list[Variation]) -> None:
        self._session.add_all([_to_model(v) for v in variations])
        await self._session.flush()
