"""
ORM tables for listings, their variations and their gallery images.

Repositories map these rows to and from domain entities; nothing outside
infrastructure/database imports them.
"""
import uuid
from datetime import date, datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from listing_wizard.domain.enums.listing_status import ListingStatus
from listing_wizard.infrastructure.database.connection import Base

_listing_status_enum = SAEnum(
    ListingStatus,
    name="listing_status",
    values_callable=lambda obj: [e.value for e in obj],
)

SELLER_SKU_CONSTRAINT = "uq_listings_seller_sku"
PRODUCT_IDENTIFIER_CONSTRAINT = "uq_listings_product_identifier"


class ListingModel(Base):
    __tablename__ = "listings"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    product_identifier: Mapped[str] = mapped_column(String(32), nullable=False)

    # Details
    category: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    subcategory: Mapped[str] = mapped_column(String(128), nullable=False)
    name: Mapped[str] = mapped_column(String(512), nullable=False)
    product_id_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    brand: Mapped[str | None] = mapped_column(String(256), nullable=True)
    no_brand: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    model_number: Mapped[str | None] = mapped_column(String(256), nullable=True)
    closure_type: Mapped[str | None] = mapped_column(String(128), nullable=True)
    outer_material: Mapped[str | None] = mapped_column(String(128), nullable=True)
    style: Mapped[str | None] = mapped_column(String(128), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(64), nullable=True)
    number_of_items: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    strap_type: Mapped[str | None] = mapped_column(String(128), nullable=True)
    booking_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    shipping_country: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # Variation axes
    variation_types: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    colors: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    sizes: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    editions: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)

    # Offer
    seller_sku: Mapped[str] = mapped_column(String(128), nullable=False)
    price: Mapped[float | None] = mapped_column(Numeric(12, 2), nullable=True)
    list_price: Mapped[float | None] = mapped_column(Numeric(12, 2), nullable=True)
    maximum_retail_price: Mapped[float | None] = mapped_column(Numeric(12, 2), nullable=True)
    quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    condition: Mapped[str | None] = mapped_column(String(64), nullable=True)
    country_of_origin: Mapped[str | None] = mapped_column(String(128), nullable=True)
    fulfillment_channel: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # Description and keywords
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    bullet_points: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=list)
    keywords: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)

    # Progress
    current_step: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(_listing_status_enum, nullable=False, index=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    variations: Mapped[list["ListingVariationModel"]] = relationship(
        "ListingVariationModel",
        back_populates="listing",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="select",
    )
    images: Mapped[list["ListingImageModel"]] = relationship(
        "ListingImageModel",
        back_populates="listing",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="select",
    )

    __table_args__ = (
        UniqueConstraint("seller_sku", name=SELLER_SKU_CONSTRAINT),
        UniqueConstraint("product_identifier", name=PRODUCT_IDENTIFIER_CONSTRAINT),
        Index("ix_listings_owner_status", "owner_id", "status"),
    )


class ListingVariationModel(Base):
    __tablename__ = "listing_variations"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    listing_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sku: Mapped[str] = mapped_column(String(256), nullable=False)
    color: Mapped[str | None] = mapped_column(String(128), nullable=True)
    size: Mapped[str | None] = mapped_column(String(128), nullable=True)
    edition: Mapped[str | None] = mapped_column(String(128), nullable=True)
    product_id_value: Mapped[str | None] = mapped_column(String(128), nullable=True)
    product_id_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    price: Mapped[float | None] = mapped_column(Numeric(12, 2), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    condition: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # At most one image per variation
    image_handle: Mapped[str | None] = mapped_column(String(512), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    image_original_name: Mapped[str | None] = mapped_column(String(512), nullable=True)
    image_size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    image_mime_type: Mapped[str | None] = mapped_column(String(128), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    listing: Mapped[ListingModel] = relationship("ListingModel", back_populates="variations")


class ListingImageModel(Base):
    __tablename__ = "listing_images"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    listing_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    handle: Mapped[str] = mapped_column(String(512), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    original_name: Mapped[str | None] = mapped_column(String(512), nullable=True)
    size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    mime_type: Mapped[str | None] = mapped_column(String(128), nullable=True)
    position: Mapped[int] = mapped_column("order", Integer, nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    listing: Mapped[ListingModel] = relationship("ListingModel", back_populates="images")

    __table_args__ = (
        UniqueConstraint("listing_id", "order", name="uq_listing_images_listing_order"),
    )
