from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from listing_wizard.application.services.variation_set_manager import VariationSpec
from listing_wizard.domain.entities.listing import ListingDetails, Offer, Pricing


class ListingDetailsRequest(BaseModel):
    """Step 1: category placement and product attributes."""

    category: str
    subcategory: str
    name: str
    product_identifier: str | None = None
    product_id_type: str | None = None
    brand: str | None = None
    no_brand: bool = False
    model_number: str | None = None
    closure_type: str | None = None
    outer_material: str | None = None
    style: str | None = None
    gender: str | None = None
    number_of_items: int | None = None
    strap_type: str | None = None
    booking_date: date | None = None
    shipping_country: str | None = None

    def to_domain(self) -> ListingDetails:
        return ListingDetails(**self.model_dump())


class VariationTypesRequest(BaseModel):
    variation_types: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    sizes: list[str] = Field(default_factory=list)
    editions: list[str] = Field(default_factory=list)


class VariationItem(BaseModel):
    """One entry of the step 3 batch. Images are paired by position."""

    color: str | None = None
    size: str | None = None
    edition: str | None = None
    sku: str | None = None
    product_id_value: str | None = None
    product_id_type: str | None = None
    price: Decimal | None = None
    quantity: int | None = None
    condition: str | None = None

    def to_domain(self) -> VariationSpec:
        return VariationSpec(**self.model_dump())


class OfferRequest(BaseModel):
    seller_sku: str = ""
    price: Decimal | None = None
    quantity: int | None = None
    list_price: Decimal | None = None
    maximum_retail_price: Decimal | None = None
    condition: str | None = None
    country_of_origin: str | None = None
    fulfillment_channel: str | None = None

    def to_domain(self) -> Offer:
        return Offer(**self.model_dump())


class DescriptionRequest(BaseModel):
    description: str | None = None
    bullet_points: list[str] = Field(default_factory=list)


class KeywordsRequest(BaseModel):
    keywords: list[str] = Field(default_factory=list)


class CompleteListingRequest(BaseModel):
    """JSON body carried in the `listing_data` form field of the one-shot endpoint."""

    details: ListingDetailsRequest
    offer: OfferRequest = Field(default_factory=OfferRequest)
    description: str | None = None
    bullet_points: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    variation_types: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    sizes: list[str] = Field(default_factory=list)
    editions: list[str] = Field(default_factory=list)
    variations: list[VariationItem] = Field(default_factory=list)


class PricingRequest(BaseModel):
    price: Decimal | None = None
    list_price: Decimal | None = None
    maximum_retail_price: Decimal | None = None

    def to_domain(self) -> Pricing:
        return Pricing(**self.model_dump())


class UpdateListingRequest(BaseModel):
    """
    Post-publish edit. Unknown keys are accepted and later ignored, so clients
    can send a whole listing document back.
    """

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    brand: str | None = None
    model_number: str | None = None
    description: str | None = None
    bullet_points: list[str] | None = None
    keywords: list[str] | None = None
    quantity: int | None = None
    pricing: PricingRequest | None = None
    status: str | None = None


class StatusPatchRequest(BaseModel):
    status: str
