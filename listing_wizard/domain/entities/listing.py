from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from listing_wizard.domain.enums.listing_status import SELLER_SETTABLE_STATUSES, ListingStatus
from listing_wizard.domain.enums.variation_type import VariationType
from listing_wizard.domain.events.domain_events import (
    DomainEvent,
    ListingDraftCreatedEvent,
    ListingPublishedEvent,
    ListingStatusChangedEvent,
)
from listing_wizard.domain.exceptions import ListingValidationError
from listing_wizard.domain.state_machine.listing_status_machine import (
    InvalidStatusTransitionError,
    ListingStatusMachine,
)

_status_machine = ListingStatusMachine()

FIRST_STEP = 1
FINAL_STEP = 7

# Fields a seller may edit after publishing. Everything else is fixed by the wizard.
UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "brand",
        "model_number",
        "description",
        "bullet_points",
        "keywords",
        "quantity",
        "pricing",
        "status",
    }
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def normalize_keywords(keywords: list[str] | None) -> list[str]:
    """Trim, lower-case and de-duplicate keywords, keeping first-seen order."""
    seen: dict[str, None] = {}
    for keyword in keywords or []:
        if _is_blank(keyword):
            continue
        seen.setdefault(keyword.strip().lower(), None)
    return list(seen)


def clean_bullet_points(bullet_points: list[str] | None) -> list[str]:
    return [bp for bp in bullet_points or [] if not _is_blank(bp)]


def ensure_non_negative(**values: Decimal | int | None) -> None:
    """Raise ListingValidationError naming every negative value."""
    negative = [name for name, value in values.items() if value is not None and value < 0]
    if negative:
        raise ListingValidationError(
            f"Values must not be negative: {', '.join(negative)}", fields=negative
        )


@dataclass(frozen=True)
class Pricing:
    price: Decimal | None = None
    list_price: Decimal | None = None
    maximum_retail_price: Decimal | None = None

    def validate(self) -> None:
        ensure_non_negative(
            price=self.price,
            list_price=self.list_price,
            maximum_retail_price=self.maximum_retail_price,
        )


@dataclass(frozen=True)
class ListingDetails:
    """Step 1 payload: category placement and the free-form attribute bag."""

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

    def validate(self) -> None:
        missing = [
            name
            for name in ("category", "subcategory", "name")
            if _is_blank(getattr(self, name))
        ]
        if missing:
            raise ListingValidationError(
                "Category, subcategory, and name are required", fields=missing
            )
        ensure_non_negative(number_of_items=self.number_of_items)


@dataclass(frozen=True)
class Offer:
    """Step 4 payload: seller SKU, pricing, stock and fulfilment."""

    seller_sku: str
    price: Decimal | None
    quantity: int | None
    list_price: Decimal | None = None
    maximum_retail_price: Decimal | None = None
    condition: str | None = None
    country_of_origin: str | None = None
    fulfillment_channel: str | None = None

    @property
    def pricing(self) -> Pricing:
        return Pricing(
            price=self.price,
            list_price=self.list_price,
            maximum_retail_price=self.maximum_retail_price,
        )

    def validate(self) -> None:
        missing = [
            name
            for name in ("seller_sku", "price", "quantity")
            if _is_blank(getattr(self, name))
        ]
        if missing:
            raise ListingValidationError(
                "Seller SKU, price, and quantity are required", fields=missing
            )
        ensure_non_negative(quantity=self.quantity)
        self.pricing.validate()


@dataclass
class Listing:
    """
    Aggregate root for a marketplace listing built through the seven-step wizard.

    current_step is advisory progress tracking: any step may be re-applied at any
    time and overwrites only its own fields. Status changes go through the
    ListingStatusMachine and emit domain events that callers collect and publish.
    """

    # Identity
    id: UUID = field(default_factory=uuid4)
    owner_id: UUID = field(default_factory=uuid4)
    product_identifier: str = ""

    # Step 1: details
    category: str = ""
    subcategory: str = ""
    name: str = ""
    product_id_type: str | None = None
    brand: str | None = None
    no_brand: bool = False
    model_number: str | None = None
    closure_type: str | None = None
    outer_material: str | None = None
    style: str | None = None
    gender: str | None = None
    number_of_items: int = 1
    strap_type: str | None = None
    booking_date: date | None = None
    shipping_country: str | None = None

    # Step 2: variation axes
    variation_types: list[str] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)
    sizes: list[str] = field(default_factory=list)
    editions: list[str] = field(default_factory=list)

    # Step 4: offer
    seller_sku: str = ""
    pricing: Pricing = field(default_factory=Pricing)
    quantity: int | None = None
    condition: str | None = None
    country_of_origin: str | None = None
    fulfillment_channel: str | None = None

    # Steps 6 and 7
    description: str | None = None
    bullet_points: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)

    # Progress
    current_step: int = FIRST_STEP
    status: ListingStatus = ListingStatus.DRAFT
    completed_at: datetime | None = None

    # Timestamps
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # Pending domain events (collected and cleared by the application layer)
    _events: list[DomainEvent] = field(default_factory=list, repr=False, compare=False)

    # -------------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------------

    @classmethod
    def start_draft(
        cls,
        *,
        owner_id: UUID,
        product_identifier: str,
        details: ListingDetails,
    ) -> "Listing":
        details.validate()
        listing = cls(owner_id=owner_id, product_identifier=product_identifier)
        listing.seller_sku = placeholder_sku(product_identifier, listing.created_at)
        listing.apply_details(details)
        listing._events.append(
            ListingDraftCreatedEvent(
                listing_id=listing.id,
                owner_id=owner_id,
                product_identifier=product_identifier,
                category=listing.category,
                subcategory=listing.subcategory,
            )
        )
        return listing

    # -------------------------------------------------------------------------
    # Wizard steps
    # -------------------------------------------------------------------------

    def apply_details(self, details: ListingDetails) -> None:
        details.validate()
        self.category = details.category
        self.subcategory = details.subcategory
        self.name = details.name
        self.product_id_type = details.product_id_type
        self.no_brand = details.no_brand
        self.brand = None if details.no_brand else details.brand
        self.model_number = details.model_number
        self.closure_type = details.closure_type
        self.outer_material = details.outer_material
        self.style = details.style
        self.gender = details.gender
        self.number_of_items = details.number_of_items or 1
        self.strap_type = details.strap_type
        self.booking_date = details.booking_date
        self.shipping_country = details.shipping_country
        self.advance_to(FIRST_STEP)

    def set_variation_types(
        self,
        variation_types: list[str],
        *,
        colors: list[str] | None = None,
        sizes: list[str] | None = None,
        editions: list[str] | None = None,
    ) -> None:
        known = {t.value for t in VariationType}
        unknown = [t for t in variation_types if t not in known]
        if unknown:
            raise ListingValidationError(
                f"Unknown variation types: {', '.join(unknown)}", fields=["variation_types"]
            )
        selected = list(dict.fromkeys(variation_types))
        self.variation_types = selected
        self.colors = list(colors or []) if VariationType.COLOR.value in selected else []
        self.sizes = list(sizes or []) if VariationType.SIZE.value in selected else []
        self.editions = list(editions or []) if VariationType.EDITION.value in selected else []
        self.advance_to(2)

    def apply_offer(self, offer: Offer) -> None:
        offer.validate()
        self.seller_sku = offer.seller_sku.strip()
        self.pricing = offer.pricing
        self.quantity = offer.quantity
        self.condition = offer.condition
        self.country_of_origin = offer.country_of_origin
        self.fulfillment_channel = offer.fulfillment_channel
        self.advance_to(4)

    def apply_description(self, description: str, bullet_points: list[str] | None = None) -> None:
        if _is_blank(description):
            raise ListingValidationError("Description is required", fields=["description"])
        self.description = description
        self.bullet_points = clean_bullet_points(bullet_points)
        self.advance_to(6)

    def apply_keywords(self, keywords: list[str] | None) -> None:
        self.keywords = normalize_keywords(keywords)
        self.advance_to(FINAL_STEP)

    def advance_to(self, step: int) -> None:
        self.current_step = step
        self.updated_at = _utcnow()

    @property
    def has_placeholder_sku(self) -> bool:
        return _is_blank(self.seller_sku) or self.seller_sku.startswith(
            f"{self.product_identifier}-TEMP-"
        )

    # -------------------------------------------------------------------------
    # Post-publish edits
    # -------------------------------------------------------------------------

    def update_fields(self, changes: dict[str, Any]) -> list[str]:
        """
        Apply the allow-listed subset of changes and return the names that were applied.

        Every value is validated before anything is assigned.
        """
        accepted = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}

        if "name" in accepted and _is_blank(accepted["name"]):
            raise ListingValidationError("Name cannot be blank", fields=["name"])
        if "description" in accepted and _is_blank(accepted["description"]):
            raise ListingValidationError("Description cannot be blank", fields=["description"])
        if "quantity" in accepted:
            if accepted["quantity"] is None:
                raise ListingValidationError("Quantity cannot be empty", fields=["quantity"])
            ensure_non_negative(quantity=accepted["quantity"])
        if "pricing" in accepted:
            pricing = accepted["pricing"]
            if pricing is None:
                raise ListingValidationError("Price is required", fields=["pricing"])
            if isinstance(pricing, dict):
                pricing = Pricing(**pricing)
            elif not isinstance(pricing, Pricing):
                raise ListingValidationError("Pricing must be an object", fields=["pricing"])
            if pricing.price is None:
                raise ListingValidationError("Price is required", fields=["price"])
            pricing.validate()
            accepted["pricing"] = pricing
        new_status = None
        if "status" in accepted:
            raw_status = accepted.pop("status")
            try:
                new_status = ListingStatus(raw_status)
            except ValueError:
                raise ListingValidationError(
                    f"Invalid status: {raw_status}", fields=["status"]
                ) from None
            self._ensure_seller_can_set(new_status)

        for name, value in accepted.items():
            if name == "keywords":
                value = normalize_keywords(value)
            elif name == "bullet_points":
                value = clean_bullet_points(value)
            setattr(self, name, value)

        if new_status is not None:
            self.transition_to(new_status)
            accepted["status"] = new_status
        self.updated_at = _utcnow()
        return sorted(accepted)

    def change_status(self, new_status: ListingStatus) -> ListingStatus:
        """Seller-driven status patch. Returns the previous status."""
        self._ensure_seller_can_set(new_status)
        previous = self.status
        self.transition_to(new_status)
        return previous

    def _ensure_seller_can_set(self, new_status: ListingStatus) -> None:
        if new_status not in SELLER_SETTABLE_STATUSES:
            raise ListingValidationError(
                f"Invalid status: {new_status.value}", fields=["status"]
            )
        if self.status is ListingStatus.DRAFT:
            # Drafts only go live through the finalizer
            raise InvalidStatusTransitionError(self.status, new_status)

    # -------------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------------

    def transition_to(self, new_status: ListingStatus) -> None:
        """Validate and apply a status transition, recording the domain events."""
        _status_machine.validate_transition(self.status, new_status)
        if new_status == self.status:
            return

        old_status = self.status
        self.status = new_status
        self.updated_at = _utcnow()

        self._events.append(
            ListingStatusChangedEvent(
                listing_id=self.id,
                from_status=old_status,
                to_status=new_status,
            )
        )
        if old_status is ListingStatus.DRAFT:
            self._events.append(
                ListingPublishedEvent(
                    listing_id=self.id,
                    owner_id=self.owner_id,
                    product_identifier=self.product_identifier,
                    seller_sku=self.seller_sku,
                )
            )

    # -------------------------------------------------------------------------
    # Event collection
    # -------------------------------------------------------------------------

    def record_event(self, event: DomainEvent) -> None:
        self._events.append(event)

    def collect_events(self) -> list[DomainEvent]:
        """Return pending events and clear the internal buffer."""
        events = list(self._events)
        self._events.clear()
        return events


def placeholder_sku(product_identifier: str, created_at: datetime) -> str:
    """Temporary SKU held by a draft until the seller submits an offer."""
    return f"{product_identifier}-TEMP-{int(created_at.timestamp() * 1000)}"
