"""Unit tests for the post-creation use cases: read, list, update, status patch and delete."""
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from listing_wizard.application.services.variation_set_manager import VariationSpec
from listing_wizard.application.use_cases.complete_listing_in_one_shot import CompleteListingInput
from listing_wizard.application.use_cases.list_listings import ListListingsInput
from listing_wizard.application.use_cases.update_listing import UpdateListingInput
from listing_wizard.domain.enums.listing_status import ListingStatus
from listing_wizard.domain.events.domain_events import ListingDeletedEvent
from listing_wizard.domain.exceptions import ListingNotFoundError, ListingValidationError
from listing_wizard.domain.state_machine.listing_status_machine import InvalidStatusTransitionError
from tests.fakes import Harness, image, phone_details, phone_offer


async def _publish(harness: Harness, owner: UUID, name: str = "Phone X", sku: str = "PHX-001", **offer):
    output = await harness.one_shot.execute(
        CompleteListingInput(
            owner_id=owner,
            details=phone_details(name=name),
            offer=phone_offer(seller_sku=sku, **offer),
            description=f"{name} description",
            variations=[VariationSpec(color="Black"), VariationSpec(color="White")],
            variation_uploads=[image(), image()],
            gallery_uploads=[image(), image(), image()],
        )
    )
    return output.listing


class TestGetListing:
    @pytest.mark.asyncio
    async def test_returns_variations_and_gallery(self, harness: Harness) -> None:
        listing = await _publish(harness, uuid4())
        view = await harness.get_listing.execute(listing.id)
        assert len(view.variations) == 2
        assert [i.order for i in view.images] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_unknown_id(self, harness: Harness) -> None:
        with pytest.raises(ListingNotFoundError):
            await harness.get_listing.execute(uuid4())


class TestListListings:
    @pytest.mark.asyncio
    async def test_scoped_to_owner_with_pagination(self, harness: Harness) -> None:
        owner = uuid4()
        for i in range(3):
            await _publish(harness, owner, name=f"Phone {i}", sku=f"SKU-{i}")
        await _publish(harness, uuid4(), name="Someone else", sku="OTHER-1")

        page = await harness.list_listings.execute(ListListingsInput(owner_id=owner, limit=2))

        assert page.total == 3
        assert len(page.items) == 2
        assert page.total_pages == 2
        assert page.has_next is True
        assert page.has_prev is False
        assert all(item.primary_image_url for item in page.items)

    @pytest.mark.asyncio
    async def test_search_matches_sku(self, harness: Harness) -> None:
        owner = uuid4()
        await _publish(harness, owner, name="Phone X", sku="PHX-001")
        await _publish(harness, owner, name="Tablet", sku="TAB-001")

        page = await harness.list_listings.execute(ListListingsInput(owner_id=owner, search="tab-"))

        assert [item.listing.seller_sku for item in page.items] == ["TAB-001"]

    @pytest.mark.asyncio
    async def test_sort_by_price_ascending(self, harness: Harness) -> None:
        owner = uuid4()
        await _publish(harness, owner, name="Dear", sku="A", price=Decimal("900"))
        await _publish(harness, owner, name="Cheap", sku="B", price=Decimal("100"))

        page = await harness.list_listings.execute(
            ListListingsInput(owner_id=owner, sort_by="price", order="asc")
        )

        assert [item.listing.name for item in page.items] == ["Cheap", "Dear"]

    @pytest.mark.asyncio
    async def test_rejects_unknown_sort_field(self, harness: Harness) -> None:
        with pytest.raises(ListingValidationError):
            await harness.list_listings.execute(ListListingsInput(owner_id=uuid4(), sort_by="owner_id"))


class TestUpdateListing:
    @pytest.mark.asyncio
    async def test_allow_list_and_appended_images(self, harness: Harness) -> None:
        owner = uuid4()
        listing = await _publish(harness, owner)
        handles_before = set(harness.store.objects)

        output = await harness.update.execute(
            UpdateListingInput(
                listing_id=listing.id,
                owner_id=owner,
                changes={"name": "Phone X (2024)", "seller_sku": "NEW", "keywords": ["A", "a"]},
                uploads=[image("extra.jpg")],
            )
        )

        assert output.applied_fields == ["keywords", "name"]
        assert output.listing.seller_sku == "PHX-001"
        assert output.listing.keywords == ["a"]
        assert output.added_images[0].order == 3
        assert output.added_images[0].is_primary is False
        assert handles_before <= set(harness.store.objects)

    @pytest.mark.asyncio
    async def test_other_owner_cannot_update(self, harness: Harness) -> None:
        listing = await _publish(harness, uuid4())
        with pytest.raises(ListingNotFoundError):
            await harness.update.execute(
                UpdateListingInput(listing_id=listing.id, owner_id=uuid4(), changes={"name": "x"})
            )


class TestUpdateStatus:
    @pytest.mark.asyncio
    async def test_active_to_out_of_stock_and_back(self, harness: Harness) -> None:
        owner = uuid4()
        listing = await _publish(harness, owner)

        out = await harness.update_status.execute(listing.id, owner, ListingStatus.OUT_OF_STOCK)
        back = await harness.update_status.execute(listing.id, owner, ListingStatus.ACTIVE)

        assert out.from_status is ListingStatus.ACTIVE
        assert out.to_status is ListingStatus.OUT_OF_STOCK
        assert back.to_status is ListingStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_draft_cannot_be_activated_by_patch(self, harness: Harness) -> None:
        owner = uuid4()
        draft = await harness.workflow.create_draft(owner, phone_details())
        with pytest.raises(InvalidStatusTransitionError):
            await harness.update_status.execute(draft.id, owner, ListingStatus.ACTIVE)


class TestDeleteListing:
    @pytest.mark.asyncio
    async def test_removes_records_and_media(self, harness: Harness) -> None:
        owner = uuid4()
        listing = await _publish(harness, owner)

        output = await harness.delete.execute(listing.id, owner)

        assert output.media_cleanup_failures == 0
        assert await harness.variation_repo.list_for_listing(listing.id) == []
        assert await harness.image_repo.list_for_listing(listing.id) == []
        assert harness.store.objects == {}
        with pytest.raises(ListingNotFoundError):
            await harness.get_listing.execute(listing.id)

    @pytest.mark.asyncio
    async def test_media_failures_do_not_block_delete(self, harness: Harness) -> None:
        owner = uuid4()
        listing = await _publish(harness, owner)
        harness.store.fail_deletes = True

        output = await harness.delete.execute(listing.id, owner)

        assert output.media_cleanup_failures == 5
        assert listing.id not in harness.listings.rows
        deleted = harness.publisher.of_type(ListingDeletedEvent)
        assert deleted[0].orphaned_media == 5

    @pytest.mark.asyncio
    async def test_other_owner_cannot_delete(self, harness: Harness) -> None:
        listing = await _publish(harness, uuid4())
        with pytest.raises(ListingNotFoundError):
            await harness.delete.execute(listing.id, uuid4())
        assert listing.id in harness.listings.rows
