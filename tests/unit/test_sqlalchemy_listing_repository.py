"""Unit tests for the SQLAlchemy listing repository against a mocked AsyncSession."""
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError

from listing_wizard.application.interfaces.listing_repository import ListingQuery
from listing_wizard.domain.entities.listing import Listing
from listing_wizard.domain.exceptions import (
    ProductIdentifierConflictError,
    SkuConflictError,
)
from listing_wizard.infrastructure.database.repositories.listing_repository import (
    SqlAlchemyListingRepository,
    search_pattern,
)
from tests.fakes import phone_details, phone_offer


def _listing() -> Listing:
    listing = Listing.start_draft(
        owner_id=uuid4(), product_identifier="BLTEST0001", details=phone_details()
    )
    listing.apply_offer(phone_offer())
    return listing


def _session_failing_flush(constraint: str) -> MagicMock:
    session = MagicMock()
    session.get = AsyncMock(return_value=None)
    session.flush = AsyncMock(
        side_effect=IntegrityError(
            "INSERT INTO listings",
            {},
            Exception(f'duplicate key value violates unique constraint "{constraint}"'),
        )
    )
    return session


class TestSave:
    @pytest.mark.asyncio
    async def test_new_listing_is_added_and_flushed(self) -> None:
        session = MagicMock()
        session.get = AsyncMock(return_value=None)
        session.flush = AsyncMock()
        listing = _listing()

        await SqlAlchemyListingRepository(session).save(listing)

        model = session.add.call_args.args[0]
        assert model.id == listing.id
        assert model.seller_sku == "PHX-001"
        assert model.status == "draft"
        session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_seller_sku_violation_becomes_sku_conflict(self) -> None:
        repo = SqlAlchemyListingRepository(_session_failing_flush("uq_listings_seller_sku"))

        with pytest.raises(SkuConflictError) as exc_info:
            await repo.save(_listing())

        assert exc_info.value.sku == "PHX-001"
        assert isinstance(exc_info.value.__cause__, IntegrityError)

    @pytest.mark.asyncio
    async def test_product_identifier_violation_becomes_identifier_conflict(self) -> None:
        repo = SqlAlchemyListingRepository(
            _session_failing_flush("uq_listings_product_identifier")
        )

        with pytest.raises(ProductIdentifierConflictError) as exc_info:
            await repo.save(_listing())

        assert exc_info.value.product_identifier == "BLTEST0001"

    @pytest.mark.asyncio
    async def test_other_integrity_errors_propagate(self) -> None:
        repo = SqlAlchemyListingRepository(_session_failing_flush("listings_pkey"))

        with pytest.raises(IntegrityError):
            await repo.save(_listing())


class TestSearch:
    def test_pattern_wraps_plain_terms(self) -> None:
        assert search_pattern("phone") == "%phone%"

    def test_pattern_escapes_like_metacharacters(self) -> None:
        assert search_pattern("50%_off") == "%50\\%\\_off%"
        assert search_pattern("a\\b") == "%a\\\\b%"

    @pytest.mark.asyncio
    async def test_list_all_matches_metacharacters_literally(self) -> None:
        rows = MagicMock()
        rows.scalars.return_value.all.return_value = []
        count = MagicMock()
        count.scalar_one.return_value = 0
        session = MagicMock()
        session.execute = AsyncMock(side_effect=[rows, count])

        listings, total = await SqlAlchemyListingRepository(session).list_all(
            ListingQuery(search="100%")
        )

        assert (listings, total) == ([], 0)
        compiled = session.execute.await_args_list[0].args[0].compile(
            dialect=postgresql.dialect()
        )
        assert "ESCAPE" in str(compiled)
        assert "%100\\%%" in compiled.params.values()
