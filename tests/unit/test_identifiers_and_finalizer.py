import re
from uuid import uuid4

import pytest

from listing_wizard.domain.entities.listing import Listing
from listing_wizard.domain.enums.listing_status import ListingStatus
from listing_wizard.domain.exceptions import ListingValidationError
from listing_wizard.domain.services.identifiers import (
    derive_variation_sku,
    generate_product_identifier,
)
from listing_wizard.domain.services.listing_finalizer import ListingFinalizer
from tests.fakes import phone_details, phone_offer


class TestProductIdentifier:
    def test_format(self) -> None:
        assert re.fullmatch(r"BL[A-Z0-9]{8}", generate_product_identifier())

    def test_not_constant(self) -> None:
        assert len({generate_product_identifier() for _ in range(20)}) > 1


class TestVariationSku:
    def test_color_and_size(self) -> None:
        assert derive_variation_sku("BL12345678", "Space Gray", "128 GB") == "BL12345678-SPACE-GRAY-128-GB"

    def test_missing_axis_leaves_empty_segment(self) -> None:
        assert derive_variation_sku("BL12345678", "red", None) == "BL12345678-RED-"
        assert derive_variation_sku("BL12345678", None, "xl") == "BL12345678--XL"


class TestListingFinalizer:
    def _listing(self) -> Listing:
        listing = Listing.start_draft(
            owner_id=uuid4(), product_identifier="BLFINAL001", details=phone_details()
        )
        listing.collect_events()
        return listing

    def test_placeholder_sku_counts_as_missing(self) -> None:
        listing = self._listing()
        missing = ListingFinalizer().missing_fields(listing)
        assert "seller_sku" in missing
        assert "description" in missing
        assert "name" not in missing

    def test_incomplete_listing_stays_draft(self) -> None:
        listing = self._listing()
        with pytest.raises(ListingValidationError) as exc_info:
            ListingFinalizer().finalize(listing)
        assert "price" in exc_info.value.fields
        assert listing.status is ListingStatus.DRAFT
        assert listing.completed_at is None

    def test_finalize_activates_and_stamps(self) -> None:
        listing = self._listing()
        listing.apply_offer(phone_offer())
        listing.apply_description("A phone.")
        ListingFinalizer().finalize(listing)
        assert listing.status is ListingStatus.ACTIVE
        assert listing.completed_at is not None

    def test_completed_at_not_restamped(self) -> None:
        listing = self._listing()
        listing.apply_offer(phone_offer())
        listing.apply_description("A phone.")
        finalizer = ListingFinalizer()
        finalizer.finalize(listing)
        first = listing.completed_at
        finalizer.finalize(listing)
        assert listing.completed_at == first
