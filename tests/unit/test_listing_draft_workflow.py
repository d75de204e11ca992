"""Unit tests for the seven-step listing wizard, wired to in-memory collaborators."""
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from listing_wizard.application.services.variation_set_manager import VariationSpec
from listing_wizard.domain.enums.listing_status import ListingStatus
from listing_wizard.domain.events.domain_events import (
    ListingDraftCreatedEvent,
    ListingPublishedEvent,
)
from listing_wizard.domain.exceptions import (
    CatalogUnavailableError,
    ListingNotFoundError,
    ListingValidationError,
    ProductIdentifierConflictError,
    SkuConflictError,
)
from tests.fakes import Harness, image, phone_details, phone_offer


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_phone_x_wizard(self, harness: Harness) -> None:
        owner = uuid4()
        wf = harness.workflow

        draft = await wf.create_draft(
            owner,
            phone_details(subcategory="Mobile Phones", product_identifier="PHX-001"),
        )
        await wf.set_variation_types(
            draft.id, owner, ["Color", "Size"], colors=["Black"], sizes=["128GB"]
        )
        step3 = await wf.set_variations(
            draft.id, owner, [VariationSpec(color="Black", size="128GB")], [image()]
        )
        await wf.set_offer(
            draft.id,
            owner,
            phone_offer(
                seller_sku="PHX-001",
                price=Decimal("499.99"),
                quantity=10,
                condition="New",
                fulfillment_channel="Self Ship",
            ),
        )
        step5 = await wf.set_gallery(draft.id, owner, [image("front.jpg")])
        await wf.set_description(draft.id, owner, "Great phone")
        final = await wf.set_keywords_and_publish(draft.id, owner, ["phone", "electronics"])

        assert final.status is ListingStatus.ACTIVE
        assert final.current_step == 7
        assert final.completed_at is not None
        assert final.keywords == ["phone", "electronics"]
        assert final.pricing.price == Decimal("499.99")
        assert step3.result.variations[0].sku == "PHX-001-BLACK-128GB"
        assert step5.images[0].is_primary is True

        view = await harness.get_listing.execute(draft.id)
        assert [v.sku for v in view.variations] == ["PHX-001-BLACK-128GB"]
        assert view.variations[0].image is not None
        assert len(view.images) == 1 and view.images[0].is_primary

        assert len(harness.publisher.of_type(ListingDraftCreatedEvent)) == 1
        assert len(harness.publisher.of_type(ListingPublishedEvent)) == 1


class TestCreateDraft:
    @pytest.mark.asyncio
    async def test_generated_identifier_and_placeholder_sku(self, harness: Harness) -> None:
        listing = await harness.workflow.create_draft(uuid4(), phone_details())

        assert listing.product_identifier.startswith("BL")
        assert listing.has_placeholder_sku
        assert listing.status is ListingStatus.DRAFT
        assert listing.current_step == 1

    @pytest.mark.asyncio
    async def test_identifier_collision_is_rerolled(
        self, harness: Harness, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        existing = await harness.workflow.create_draft(uuid4(), phone_details())
        candidates = iter([existing.product_identifier, "BLFRESH001"])
        monkeypatch.setattr(
            "listing_wizard.application.use_cases.listing_draft_workflow.generate_product_identifier",
            lambda: next(candidates),
        )

        listing = await harness.workflow.create_draft(uuid4(), phone_details())

        assert listing.product_identifier == "BLFRESH001"

    @pytest.mark.asyncio
    async def test_taken_requested_identifier_conflicts(self, harness: Harness) -> None:
        await harness.workflow.create_draft(uuid4(), phone_details(product_identifier="PHX-001"))
        with pytest.raises(ProductIdentifierConflictError):
            await harness.workflow.create_draft(uuid4(), phone_details(product_identifier="PHX-001"))

    @pytest.mark.asyncio
    async def test_inactive_category_rejected(self, harness: Harness) -> None:
        harness.catalog.inactive.add(("Electronics", "Phones"))
        with pytest.raises(ListingValidationError):
            await harness.workflow.create_draft(uuid4(), phone_details())
        assert harness.listings.rows == {}

    @pytest.mark.asyncio
    async def test_catalog_outage_surfaces(self, harness: Harness) -> None:
        harness.catalog.unavailable = True
        with pytest.raises(CatalogUnavailableError):
            await harness.workflow.create_draft(uuid4(), phone_details())


class TestOwnership:
    @pytest.mark.asyncio
    async def test_other_seller_gets_not_found(self, harness: Harness) -> None:
        listing = await harness.workflow.create_draft(uuid4(), phone_details())
        with pytest.raises(ListingNotFoundError):
            await harness.workflow.set_description(listing.id, uuid4(), "Mine now")

    @pytest.mark.asyncio
    async def test_unknown_listing_not_found(self, harness: Harness) -> None:
        with pytest.raises(ListingNotFoundError):
            await harness.workflow.set_keywords_and_publish(uuid4(), uuid4(), ["x"])


class TestStepsAreReentrant:
    @pytest.mark.asyncio
    async def test_resubmitting_variations_replaces_the_set(self, harness: Harness) -> None:
        owner = uuid4()
        listing = await harness.workflow.create_draft(owner, phone_details())
        await harness.workflow.set_variations(
            listing.id,
            owner,
            [VariationSpec(color="Black"), VariationSpec(color="White"), VariationSpec(color="Red")],
        )

        output = await harness.workflow.set_variations(
            listing.id, owner, [VariationSpec(color="Blue")]
        )

        view = await harness.get_listing.execute(listing.id)
        assert output.result.total == 1
        assert [v.color for v in view.variations] == ["Blue"]
        assert output.listing.current_step == 3

    @pytest.mark.asyncio
    async def test_replace_survives_failed_media_delete(self, harness: Harness) -> None:
        owner = uuid4()
        listing = await harness.workflow.create_draft(owner, phone_details())
        await harness.workflow.set_variations(
            listing.id, owner, [VariationSpec(color="Black")], [image()]
        )
        harness.store.fail_deletes = True

        output = await harness.workflow.set_variations(
            listing.id, owner, [VariationSpec(color="White"), VariationSpec(color="Gold")]
        )

        assert output.result.total == 2
        assert output.result.cleanup_failures == 1

    @pytest.mark.asyncio
    async def test_steps_can_run_out_of_order(self, harness: Harness) -> None:
        owner = uuid4()
        listing = await harness.workflow.create_draft(owner, phone_details())
        await harness.workflow.set_description(listing.id, owner, "Described first")
        updated = await harness.workflow.set_variation_types(listing.id, owner, ["Size"], sizes=["XL"])
        assert updated.current_step == 2
        assert updated.description == "Described first"


class TestOffer:
    @pytest.mark.asyncio
    async def test_duplicate_sku_conflicts_and_leaves_sku(self, harness: Harness) -> None:
        owner = uuid4()
        first = await harness.workflow.create_draft(owner, phone_details())
        await harness.workflow.set_offer(first.id, owner, phone_offer(seller_sku="PHX-001"))
        second = await harness.workflow.create_draft(owner, phone_details(name="Phone Y"))

        with pytest.raises(SkuConflictError):
            await harness.workflow.set_offer(second.id, owner, phone_offer(seller_sku="PHX-001"))

        reloaded = await harness.listings.get_by_id(second.id)
        assert reloaded.seller_sku == second.seller_sku
        assert reloaded.has_placeholder_sku

    @pytest.mark.asyncio
    async def test_sku_taken_between_check_and_write_conflicts(
        self, harness: Harness, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        owner = uuid4()
        first = await harness.workflow.create_draft(owner, phone_details())
        await harness.workflow.set_offer(first.id, owner, phone_offer(seller_sku="PHX-001"))
        second = await harness.workflow.create_draft(owner, phone_details(name="Phone Y"))
        harness.publisher.events.clear()
        # Another writer claims the SKU after the pre-check has already passed.
        monkeypatch.setattr(harness.listings, "find_id_by_sku", AsyncMock(return_value=None))

        with pytest.raises(SkuConflictError):
            await harness.workflow.set_offer(second.id, owner, phone_offer(seller_sku="PHX-001"))

        reloaded = await harness.listings.get_by_id(second.id)
        assert reloaded.has_placeholder_sku
        assert harness.publisher.events == []

    @pytest.mark.asyncio
    async def test_set_offer_is_idempotent(self, harness: Harness) -> None:
        owner = uuid4()
        listing = await harness.workflow.create_draft(owner, phone_details())
        offer = phone_offer()

        first = await harness.workflow.set_offer(listing.id, owner, offer)
        second = await harness.workflow.set_offer(listing.id, owner, offer)

        assert second.seller_sku == first.seller_sku
        assert second.pricing == first.pricing
        assert second.quantity == first.quantity
        assert second.status is first.status
        assert len(harness.listings.rows) == 1

    @pytest.mark.asyncio
    async def test_negative_price_leaves_pricing(self, harness: Harness) -> None:
        owner = uuid4()
        listing = await harness.workflow.create_draft(owner, phone_details())
        await harness.workflow.set_offer(listing.id, owner, phone_offer())

        with pytest.raises(ListingValidationError):
            await harness.workflow.set_offer(listing.id, owner, phone_offer(price=Decimal("-1")))

        reloaded = await harness.listings.get_by_id(listing.id)
        assert reloaded.pricing.price == Decimal("599.00")


class TestGalleryStep:
    @pytest.mark.asyncio
    async def test_gallery_step_requires_images(self, harness: Harness) -> None:
        owner = uuid4()
        listing = await harness.workflow.create_draft(owner, phone_details())
        with pytest.raises(ListingValidationError):
            await harness.workflow.set_gallery(listing.id, owner, [])


class TestPublish:
    @pytest.mark.asyncio
    async def test_incomplete_draft_is_not_published(self, harness: Harness) -> None:
        owner = uuid4()
        listing = await harness.workflow.create_draft(owner, phone_details())

        with pytest.raises(ListingValidationError) as exc_info:
            await harness.workflow.set_keywords_and_publish(listing.id, owner, ["phone"])

        assert "seller_sku" in exc_info.value.fields
        reloaded = await harness.listings.get_by_id(listing.id)
        assert reloaded.status is ListingStatus.DRAFT

    @pytest.mark.asyncio
    async def test_republishing_only_updates_keywords(self, harness: Harness) -> None:
        owner = uuid4()
        listing = await harness.workflow.create_draft(owner, phone_details())
        await harness.workflow.set_offer(listing.id, owner, phone_offer())
        await harness.workflow.set_description(listing.id, owner, "Great phone")
        first = await harness.workflow.set_keywords_and_publish(listing.id, owner, ["phone"])

        second = await harness.workflow.set_keywords_and_publish(listing.id, owner, ["Phone", "5G"])

        assert second.keywords == ["phone", "5g"]
        assert second.completed_at == first.completed_at
        assert len(harness.publisher.of_type(ListingPublishedEvent)) == 1
