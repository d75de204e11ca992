"""initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, ENUM, UUID

from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    listing_status = ENUM(
        "draft",
        "active",
        "inactive",
        "out_of_stock",
        name="listing_status",
        create_type=False,
    )
    listing_status.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "listings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_id", UUID(as_uuid=True), nullable=False),
        sa.Column("product_identifier", sa.String(32), nullable=False),
        # Step 1 details
        sa.Column("category", sa.String(128), nullable=False),
        sa.Column("subcategory", sa.String(128), nullable=False),
        sa.Column("name", sa.String(512), nullable=False),
        sa.Column("product_id_type", sa.String(64), nullable=True),
        sa.Column("brand", sa.String(256), nullable=True),
        sa.Column("no_brand", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("model_number", sa.String(256), nullable=True),
        sa.Column("closure_type", sa.String(128), nullable=True),
        sa.Column("outer_material", sa.String(128), nullable=True),
        sa.Column("style", sa.String(128), nullable=True),
        sa.Column("gender", sa.String(64), nullable=True),
        sa.Column("number_of_items", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("strap_type", sa.String(128), nullable=True),
        sa.Column("booking_date", sa.Date(), nullable=True),
        sa.Column("shipping_country", sa.String(128), nullable=True),
        # Step 2 variation axes
        sa.Column("variation_types", ARRAY(sa.String()), nullable=False, server_default="{}"),
        sa.Column("colors", ARRAY(sa.String()), nullable=False, server_default="{}"),
        sa.Column("sizes", ARRAY(sa.String()), nullable=False, server_default="{}"),
        sa.Column("editions", ARRAY(sa.String()), nullable=False, server_default="{}"),
        # Step 4 offer
        sa.Column("seller_sku", sa.String(128), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=True),
        sa.Column("list_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("maximum_retail_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=True),
        sa.Column("condition", sa.String(64), nullable=True),
        sa.Column("country_of_origin", sa.String(128), nullable=True),
        sa.Column("fulfillment_channel", sa.String(128), nullable=True),
        # Steps 6 and 7
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("bullet_points", ARRAY(sa.Text()), nullable=False, server_default="{}"),
        sa.Column("keywords", ARRAY(sa.String()), nullable=False, server_default="{}"),
        # Progress
        sa.Column("current_step", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", listing_status, nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.UniqueConstraint("seller_sku", name="uq_listings_seller_sku"),
        sa.UniqueConstraint("product_identifier", name="uq_listings_product_identifier"),
    )
    op.create_index("ix_listings_owner_id", "listings", ["owner_id"])
    op.create_index("ix_listings_category", "listings", ["category"])
    op.create_index("ix_listings_status", "listings", ["status"])
    op.create_index("ix_listings_owner_status", "listings", ["owner_id", "status"])

    op.create_table(
        "listing_variations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "listing_id",
            UUID(as_uuid=True),
            sa.ForeignKey("listings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sku", sa.String(256), nullable=False),
        sa.Column("color", sa.String(128), nullable=True),
        sa.Column("size", sa.String(128), nullable=True),
        sa.Column("edition", sa.String(128), nullable=True),
        sa.Column("product_id_value", sa.String(128), nullable=True),
        sa.Column("product_id_type", sa.String(64), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("condition", sa.String(64), nullable=True),
        sa.Column("image_handle", sa.String(512), nullable=True),
        sa.Column("image_url", sa.String(2048), nullable=True),
        sa.Column("image_original_name", sa.String(512), nullable=True),
        sa.Column("image_size", sa.BigInteger(), nullable=True),
        sa.Column("image_mime_type", sa.String(128), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_listing_variations_listing_id", "listing_variations", ["listing_id"])

    op.create_table(
        "listing_images",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "listing_id",
            UUID(as_uuid=True),
            sa.ForeignKey("listings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("handle", sa.String(512), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("original_name", sa.String(512), nullable=True),
        sa.Column("size", sa.BigInteger(), nullable=True),
        sa.Column("mime_type", sa.String(128), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.UniqueConstraint("listing_id", "order", name="uq_listing_images_listing_order"),
    )
    op.create_index("ix_listing_images_listing_id", "listing_images", ["listing_id"])


def downgrade() -> None:
    op.drop_table("listing_images")
    op.drop_table("listing_variations")
    op.drop_table("listings")
    ENUM(name="listing_status").drop(op.get_bind(), checkfirst=True)
