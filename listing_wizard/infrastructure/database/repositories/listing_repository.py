from decimal import Decimal
from uuid import UUID

import structlog
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from listing_wizard.application.interfaces.listing_repository import (
    ListingQuery,
    ListingRepository,
)
from listing_wizard.domain.entities.listing import Listing, Pricing
from listing_wizard.domain.enums.listing_status import ListingStatus
from listing_wizard.domain.exceptions import (
    ProductIdentifierConflictError,
    SkuConflictError,
)
from listing_wizard.infrastructure.database.models import (
    PRODUCT_IDENTIFIER_CONSTRAINT,
    SELLER_SKU_CONSTRAINT,
    ListingModel,
)

logger = structlog.get_logger(__name__)

_SORT_COLUMNS = {
    "created_at": ListingModel.created_at,
    "updated_at": ListingModel.updated_at,
    "name": ListingModel.name,
    "price": ListingModel.price,
    "quantity": ListingModel.quantity,
}

# Columns copied verbatim between entity and row
_PLAIN_FIELDS = (
    "owner_id",
    "product_identifier",
    "category",
    "subcategory",
    "name",
    "product_id_type",
    "brand",
    "no_brand",
    "model_number",
    "closure_type",
    "outer_material",
    "style",
    "gender",
    "number_of_items",
    "strap_type",
    "booking_date",
    "shipping_country",
    "seller_sku",
    "quantity",
    "condition",
    "country_of_origin",
    "fulfillment_channel",
    "description",
    "current_step",
    "completed_at",
    "created_at",
    "updated_at",
)

_LIST_FIELDS = ("variation_types", "colors", "sizes", "editions", "bullet_points", "keywords")


def _dec(value: float | Decimal | None) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


def search_pattern(term: str) -> str:
    """Substring ILIKE pattern with the LIKE metacharacters in term matched literally."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _to_domain(model: ListingModel) -> Listing:
    listing = Listing(
        id=model.id,
        status=ListingStatus(model.status),
        pricing=Pricing(
            price=_dec(model.price),
            list_price=_dec(model.list_price),
            maximum_retail_price=_dec(model.maximum_retail_price),
        ),
    )
    for name in _PLAIN_FIELDS:
        setattr(listing, name, getattr(model, name))
    for name in _LIST_FIELDS:
        setattr(listing, name, list(getattr(model, name) or []))
    return listing


def _apply(model: ListingModel, listing: Listing) -> None:
    for name in _PLAIN_FIELDS:
        setattr(model, name, getattr(listing, name))
    for name in _LIST_FIELDS:
        setattr(model, name, list(getattr(listing, name)))
    model.status = listing.status.value
    model.price = listing.pricing.price
    model.list_price = listing.pricing.list_price
    model.maximum_retail_price = listing.pricing.maximum_retail_price


class SqlAlchemyListingRepository(ListingRepository):
    """SQLAlchemy implementation for listing persistence."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, listing: Listing) -> None:
        model = await self._session.get(ListingModel, listing.id)
        if model is None:
            model = ListingModel(id=listing.id)
            _apply(model, listing)
            self._session.add(model)
        else:
            _apply(model, listing)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            message = str(exc.orig)
            if SELLER_SKU_CONSTRAINT in message:
                logger.warning("sku_conflict_on_write", listing_id=str(listing.id), sku=listing.seller_sku)
                raise SkuConflictError(listing.seller_sku) from exc
            if PRODUCT_IDENTIFIER_CONSTRAINT in message:
                raise ProductIdentifierConflictError(listing.product_identifier) from exc
            raise

    async def get_by_id(self, listing_id: UUID) -> Listing | None:
        model = await self._session.get(ListingModel, listing_id)
        return _to_domain(model) if model is not None else None

    async def find_id_by_sku(
        self, seller_sku: str, *, exclude_listing_id: UUID | None = None
    ) -> UUID | None:
        query = select(ListingModel.id).where(ListingModel.seller_sku == seller_sku)
        if exclude_listing_id is not None:
            query = query.where(ListingModel.id != exclude_listing_id)
        result = await self._session.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def product_identifier_exists(self, product_identifier: str) -> bool:
        result = await self._session.execute(
            select(func.count())
            .select_from(ListingModel)
            .where(ListingModel.product_identifier == product_identifier)
        )
        return result.scalar_one() > 0

    async def delete(self, listing_id: UUID) -> None:
        await self._session.execute(delete(ListingModel).where(ListingModel.id == listing_id))
        await self._session.flush()

    async def list_all(self, query: ListingQuery) -> tuple[list[Listing], int]:
        filters = []
        if query.owner_id is not None:
            filters.append(ListingModel.owner_id == query.owner_id)
        if query.status is not None:
            filters.append(ListingModel.status == query.status.value)
        if query.category:
            filters.append(ListingModel.category == query.category)
        if query.search:
            pattern = search_pattern(query.search)
            filters.append(
                or_(
                    ListingModel.name.ilike(pattern, escape="\\"),
                    ListingModel.product_identifier.ilike(pattern, escape="\\"),
                    ListingModel.seller_sku.ilike(pattern, escape="\\"),
                    ListingModel.description.ilike(pattern, escape="\\"),
                )
            )

        sort_column = _SORT_COLUMNS[query.sort_by]
        order = sort_column.desc() if query.descending else sort_column.asc()

        stmt = (
            select(ListingModel)
            .where(*filters)
            .order_by(order, ListingModel.id)
            .limit(query.limit)
            .offset(query.offset)
        )
        count_stmt = select(func.count()).select_from(ListingModel).where(*filters)

        result = await self._session.execute(stmt)
        models = result.scalars().all()

        count_result = await self._session.execute(count_stmt)
        total = count_result.scalar_one()

        return [_to_domain(m) for m in models], total
