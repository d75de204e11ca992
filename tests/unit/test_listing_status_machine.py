"""Unit tests for the listing status state machine."""
import pytest

from listing_wizard.domain.enums.listing_status import ListingStatus
from listing_wizard.domain.exceptions import ListingValidationError
from listing_wizard.domain.state_machine.listing_status_machine import (
    InvalidStatusTransitionError,
    ListingStatusMachine,
)


@pytest.fixture()
def sm() -> ListingStatusMachine:
    return ListingStatusMachine()


class TestValidTransitions:
    def test_draft_to_active(self, sm: ListingStatusMachine) -> None:
        assert sm.can_transition(ListingStatus.DRAFT, ListingStatus.ACTIVE) is True

    def test_active_to_inactive(self, sm: ListingStatusMachine) -> None:
        assert sm.can_transition(ListingStatus.ACTIVE, ListingStatus.INACTIVE) is True

    def test_active_to_out_of_stock(self, sm: ListingStatusMachine) -> None:
        assert sm.can_transition(ListingStatus.ACTIVE, ListingStatus.OUT_OF_STOCK) is True

    def test_inactive_back_to_active(self, sm: ListingStatusMachine) -> None:
        assert sm.can_transition(ListingStatus.INACTIVE, ListingStatus.ACTIVE) is True

    def test_out_of_stock_back_to_active(self, sm: ListingStatusMachine) -> None:
        assert sm.can_transition(ListingStatus.OUT_OF_STOCK, ListingStatus.ACTIVE) is True

    @pytest.mark.parametrize("status", list(ListingStatus))
    def test_same_status_is_allowed(self, sm: ListingStatusMachine, status: ListingStatus) -> None:
        assert sm.can_transition(status, status) is True


class TestInvalidTransitions:
    def test_nothing_returns_to_draft(self, sm: ListingStatusMachine) -> None:
        for status in (ListingStatus.ACTIVE, ListingStatus.INACTIVE, ListingStatus.OUT_OF_STOCK):
            assert sm.can_transition(status, ListingStatus.DRAFT) is False

    def test_draft_cannot_skip_to_inactive(self, sm: ListingStatusMachine) -> None:
        assert sm.can_transition(ListingStatus.DRAFT, ListingStatus.INACTIVE) is False

    def test_inactive_to_out_of_stock_goes_through_active(self, sm: ListingStatusMachine) -> None:
        assert sm.can_transition(ListingStatus.INACTIVE, ListingStatus.OUT_OF_STOCK) is False

    def test_validate_raises(self, sm: ListingStatusMachine) -> None:
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            sm.validate_transition(ListingStatus.ACTIVE, ListingStatus.DRAFT)
        assert exc_info.value.from_status is ListingStatus.ACTIVE
        assert exc_info.value.to_status is ListingStatus.DRAFT
        assert exc_info.value.fields == ["status"]

    def test_transition_error_is_a_validation_error(self, sm: ListingStatusMachine) -> None:
        with pytest.raises(ListingValidationError):
            sm.validate_transition(ListingStatus.DRAFT, ListingStatus.OUT_OF_STOCK)


class TestAllowedTransitions:
    def test_allowed_from_active(self, sm: ListingStatusMachine) -> None:
        assert sm.get_allowed_transitions(ListingStatus.ACTIVE) == frozenset(
            {ListingStatus.INACTIVE, ListingStatus.OUT_OF_STOCK}
        )

    def test_allowed_from_draft(self, sm: ListingStatusMachine) -> None:
        assert sm.get_allowed_transitions(ListingStatus.DRAFT) == frozenset({ListingStatus.ACTIVE})
