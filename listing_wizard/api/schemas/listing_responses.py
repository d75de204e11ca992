from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from listing_wizard.domain.entities.listing import Listing
from listing_wizard.domain.entities.media_asset import ListingImage, MediaAsset
from listing_wizard.domain.entities.variation import Variation
from listing_wizard.domain.enums.listing_status import ListingStatus


class MediaResponse(BaseModel):
    handle: str
    url: str
    original_name: str
    size: int
    mime_type: str

    @classmethod
    def from_domain(cls, media: MediaAsset) -> "MediaResponse":
        return cls(
            handle=media.handle,
            url=media.url,
            original_name=media.original_name,
            size=media.size,
            mime_type=media.mime_type,
        )


class ListingImageResponse(BaseModel):
    id: UUID
    order: int
    is_primary: bool
    media: MediaResponse

    @classmethod
    def from_domain(cls, image: ListingImage) -> "ListingImageResponse":
        return cls(
            id=image.id,
            order=image.order,
            is_primary=image.is_primary,
            media=MediaResponse.from_domain(image.media),
        )


class VariationResponse(BaseModel):
    id: UUID
    sku: str
    color: str | None = None
    size: str | None = None
    edition: str | None = None
    product_id_value: str | None = None
    product_id_type: str | None = None
    price: Decimal | None = None
    quantity: int
    condition: str | None = None
    image: MediaResponse | None = None

    @classmethod
    def from_domain(cls, variation: Variation) -> "VariationResponse":
        return cls(
            id=variation.id,
            sku=variation.sku,
            color=variation.color,
            size=variation.size,
            edition=variation.edition,
            product_id_value=variation.product_id_value,
            product_id_type=variation.product_id_type,
            price=variation.price,
            quantity=variation.quantity,
            condition=variation.condition,
            image=MediaResponse.from_domain(variation.image) if variation.image else None,
        )


class PricingResponse(BaseModel):
    price: Decimal | None = None
    list_price: Decimal | None = None
    maximum_retail_price: Decimal | None = None


class ListingResponse(BaseModel):
    id: UUID
    owner_id: UUID
    product_identifier: str
    category: str
    subcategory: str
    name: str
    product_id_type: str | None = None
    brand: str | None = None
    no_brand: bool
    model_number: str | None = None
    closure_type: str | None = None
    outer_material: str | None = None
    style: str | None = None
    gender: str | None = None
    number_of_items: int
    strap_type: str | None = None
    booking_date: date | None = None
    shipping_country: str | None = None
    variation_types: list[str]
    colors: list[str]
    sizes: list[str]
    editions: list[str]
    seller_sku: str
    pricing: PricingResponse
    quantity: int | None = None
    condition: str | None = None
    country_of_origin: str | None = None
    fulfillment_channel: str | None = None
    description: str | None = None
    bullet_points: list[str]
    keywords: list[str]
    current_step: int
    status: ListingStatus
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, listing: Listing) -> "ListingResponse":
        return cls(
            id=listing.id,
            owner_id=listing.owner_id,
            product_identifier=listing.product_identifier,
            category=listing.category,
            subcategory=listing.subcategory,
            name=listing.name,
            product_id_type=listing.product_id_type,
            brand=listing.brand,
            no_brand=listing.no_brand,
            model_number=listing.model_number,
            closure_type=listing.closure_type,
            outer_material=listing.outer_material,
            style=listing.style,
            gender=listing.gender,
            number_of_items=listing.number_of_items,
            strap_type=listing.strap_type,
            booking_date=listing.booking_date,
            shipping_country=listing.shipping_country,
            variation_types=listing.variation_types,
            colors=listing.colors,
            sizes=listing.sizes,
            editions=listing.editions,
            seller_sku=listing.seller_sku,
            pricing=PricingResponse(
                price=listing.pricing.price,
                list_price=listing.pricing.list_price,
                maximum_retail_price=listing.pricing.maximum_retail_price,
            ),
            quantity=listing.quantity,
            condition=listing.condition,
            country_of_origin=listing.country_of_origin,
            fulfillment_channel=listing.fulfillment_channel,
            description=listing.description,
            bullet_points=listing.bullet_points,
            keywords=listing.keywords,
            current_step=listing.current_step,
            status=listing.status,
            completed_at=listing.completed_at,
            created_at=listing.created_at,
            updated_at=listing.updated_at,
        )


class ListingDetailResponse(BaseModel):
    listing: ListingResponse
    variations: list[VariationResponse]
    images: list[ListingImageResponse]


class VariationStepResponse(BaseModel):
    listing: ListingResponse
    variations: list[VariationResponse]
    removed_count: int
    total: int


class GalleryStepResponse(BaseModel):
    listing: ListingResponse
    images: list[ListingImageResponse]


class ListingSummaryResponse(BaseModel):
    listing: ListingResponse
    primary_image_url: str | None = None


class PaginatedListingsResponse(BaseModel):
    listings: list[ListingSummaryResponse]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_prev: bool


class UpdateListingResponse(BaseModel):
    listing: ListingResponse
    applied_fields: list[str]
    added_images: list[ListingImageResponse]


class StatusChangeResponse(BaseModel):
    listing_id: UUID
    from_status: ListingStatus
    to_status: ListingStatus


class DeleteListingResponse(BaseModel):
    listing_id: UUID
    media_cleanup_failures: int
