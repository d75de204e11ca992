"""
FastAPI dependency injection wiring.

Route handlers receive fully-built use cases; everything below them is
assembled here from settings.
"""
from collections.abc import AsyncGenerator
from functools import lru_cache
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from listing_wizard.application.interfaces.asset_store import AssetStore
from listing_wizard.application.interfaces.catalog import CatalogLookup
from listing_wizard.application.interfaces.event_publisher import EventPublisher
from listing_wizard.application.interfaces.listing_image_repository import ListingImageRepository
from listing_wizard.application.interfaces.listing_repository import ListingRepository
from listing_wizard.application.interfaces.variation_repository import VariationRepository
from listing_wizard.application.services.gallery_manager import GalleryManager
from listing_wizard.application.services.media_coordinator import MediaCoordinator, UploadPolicy
from listing_wizard.application.services.sku_registry import SkuRegistry
from listing_wizard.application.services.variation_set_manager import VariationSetManager
from listing_wizard.application.use_cases.complete_listing_in_one_shot import (
    CompleteListingInOneShot,
)
from listing_wizard.application.use_cases.delete_listing import DeleteListing
from listing_wizard.application.use_cases.get_listing import GetListing
from listing_wizard.application.use_cases.list_listings import ListListings
from listing_wizard.application.use_cases.listing_draft_workflow import ListingDraftWorkflow
from listing_wizard.application.use_cases.update_listing import UpdateListing, UpdateListingStatus
from listing_wizard.config import settings
from listing_wizard.infrastructure.database.connection import get_db_session
from listing_wizard.infrastructure.database.repositories.listing_image_repository import (
    SqlAlchemyListingImageRepository,
)
from listing_wizard.infrastructure.database.repositories.listing_repository import (
    SqlAlchemyListingRepository,
)
from listing_wizard.infrastructure.database.repositories.variation_repository import (
    SqlAlchemyVariationRepository,
)
from listing_wizard.infrastructure.external_services.catalog_client import CatalogClient
from listing_wizard.infrastructure.messaging.noop_publisher import NoOpEventPublisher
from listing_wizard.infrastructure.messaging.rabbitmq_publisher import RabbitMQPublisher
from listing_wizard.infrastructure.storage.in_memory_asset_store import InMemoryAssetStore
from listing_wizard.infrastructure.storage.s3_asset_store import S3AssetStore


# ---- Caller identity --------------------------------------------------------

def get_current_seller_id(x_seller_id: str | None = Header(default=None)) -> UUID:
    """The gateway authenticates sellers and forwards their id in X-Seller-Id."""
    if not x_seller_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-Seller-Id header.")
    try:
        return UUID(x_seller_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Malformed X-Seller-Id header."
        ) from None


# ---- Low-level dependencies ------------------------------------------------

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_db_session():
        yield session


def get_listing_repo(session: AsyncSession = Depends(get_session)) -> ListingRepository:
    return SqlAlchemyListingRepository(session)


def get_variation_repo(session: AsyncSession = Depends(get_session)) -> VariationRepository:
    return SqlAlchemyVariationRepository(session)


def get_image_repo(session: AsyncSession = Depends(get_session)) -> ListingImageRepository:
    return SqlAlchemyListingImageRepository(session)


@lru_cache
def get_asset_store() -> AssetStore:
    if settings.asset_store_backend == "memory":
        return InMemoryAssetStore()
    return S3AssetStore()


@lru_cache
def get_event_publisher() -> EventPublisher:
    if not settings.events_enabled:
        return NoOpEventPublisher()
    return RabbitMQPublisher()


def get_catalog() -> CatalogLookup:
    return CatalogClient()


def get_upload_policy() -> UploadPolicy:
    return UploadPolicy(
        max_upload_bytes=settings.max_upload_bytes,
        allowed_content_types=frozenset(t.lower() for t in settings.allowed_image_types),
        max_gallery_images=settings.max_gallery_images,
        max_files_per_request=settings.max_files_per_request,
    )


# ---- Domain services -------------------------------------------------------

def get_media_coordinator(
    asset_store: AssetStore = Depends(get_asset_store),
    policy: UploadPolicy = Depends(get_upload_policy),
) -> MediaCoordinator:
    return MediaCoordinator(asset_store, policy)


def get_sku_registry(listing_repo: ListingRepository = Depends(get_listing_repo)) -> SkuRegistry:
    return SkuRegistry(listing_repo)


def get_variation_manager(
    variation_repo: VariationRepository = Depends(get_variation_repo),
    media: MediaCoordinator = Depends(get_media_coordinator),
) -> VariationSetManager:
    return VariationSetManager(variation_repo, media)


def get_gallery_manager(
    image_repo: ListingImageRepository = Depends(get_image_repo),
    media: MediaCoordinator = Depends(get_media_coordinator),
) -> GalleryManager:
    return GalleryManager(image_repo, media)


# ---- Use-case dependencies -------------------------------------------------

def get_draft_workflow(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    sku_registry: SkuRegistry = Depends(get_sku_registry),
    variations: VariationSetManager = Depends(get_variation_manager),
    gallery: GalleryManager = Depends(get_gallery_manager),
    catalog: CatalogLookup = Depends(get_catalog),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> ListingDraftWorkflow:
    return ListingDraftWorkflow(
        listing_repo,
        sku_registry,
        variations,
        gallery,
        catalog,
        event_publisher,
        product_identifier_attempts=settings.product_identifier_attempts,
    )


def get_complete_listing_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    sku_registry: SkuRegistry = Depends(get_sku_registry),
    variations: VariationSetManager = Depends(get_variation_manager),
    gallery: GalleryManager = Depends(get_gallery_manager),
    media: MediaCoordinator = Depends(get_media_coordinator),
    catalog: CatalogLookup = Depends(get_catalog),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> CompleteListingInOneShot:
    return CompleteListingInOneShot(
        listing_repo,
        sku_registry,
        variations,
        gallery,
        media,
        catalog,
        event_publisher,
        product_identifier_attempts=settings.product_identifier_attempts,
    )


def get_listing_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    variation_repo: VariationRepository = Depends(get_variation_repo),
    image_repo: ListingImageRepository = Depends(get_image_repo),
) -> GetListing:
    return GetListing(listing_repo, variation_repo, image_repo)


def get_list_listings_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    image_repo: ListingImageRepository = Depends(get_image_repo),
) -> ListListings:
    return ListListings(listing_repo, image_repo)


def get_update_listing_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    gallery: GalleryManager = Depends(get_gallery_manager),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> UpdateListing:
    return UpdateListing(listing_repo, gallery, event_publisher)


def get_update_status_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> UpdateListingStatus:
    return UpdateListingStatus(listing_repo, event_publisher)


def get_delete_listing_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    variations: VariationSetManager = Depends(get_variation_manager),
    gallery: GalleryManager = Depends(get_gallery_manager),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> DeleteListing:
    return DeleteListing(listing_repo, variations, gallery, event_publisher)
