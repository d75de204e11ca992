"""
In-process asset store for local development and tests.
"""
import uuid

import structlog

from listing_wizard.application.interfaces.asset_store import AssetStore, StoredAsset

logger = structlog.get_logger(__name__)


class InMemoryAssetStore(AssetStore):
    """Keeps uploaded bytes in a dict. Nothing survives a restart."""

    def __init__(self, base_url: str = "memory://listing-media") -> None:
        self._base_url = base_url.rstrip("/")
        self.objects: dict[str, bytes] = {}

    async def upload(self, data: bytes, content_type: str, filename: str = "") -> StoredAsset:
        handle = f"listing-{uuid.uuid4().hex}"
        self.objects[handle] = data
        logger.debug("memory_asset_stored", handle=handle, size=len(data))
        return StoredAsset(handle=handle, url=f"{self._base_url}/{handle}")

    async def delete(self, handle: str) -> bool:
        return self.objects.pop(handle, None) is not None
