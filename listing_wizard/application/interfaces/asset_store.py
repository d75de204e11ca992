from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedFile:
    """A file received from the seller, not yet pushed to the asset store."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class StoredAsset:
    handle: str
    url: str


class AssetStore(ABC):
    """
    Port for the external object store holding listing media.

    Implementations raise AssetStoreError on failure. Deleting a handle that no
    longer exists is not a failure: delete() returns False.
    """

    @abstractmethod
    async def upload(self, data: bytes, content_type: str, filename: str = "") -> StoredAsset:
        ...

    @abstractmethod
    async def delete(self, handle: str) -> bool:
        """Return True if the handle was deleted, False if it was already gone."""
        ...
