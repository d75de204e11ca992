"""
S3-backed asset store.

boto3 is synchronous, so every call runs in the default thread-pool executor
to keep the event loop free. Objects are keyed under the configured prefix with
a random name; the handle returned to callers is the object key.
"""
import asyncio
import mimetypes
import os
import uuid
from functools import partial

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from listing_wizard.application.interfaces.asset_store import AssetStore, StoredAsset
from listing_wizard.config import settings
from listing_wizard.domain.exceptions import AssetStoreError

logger = structlog.get_logger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def build_s3_client(region: str = settings.aws_region):
    return boto3.client(
        "s3",
        region_name=region,
        config=Config(signature_version="s3v4", s3={"addressing_style": "virtual"}),
    )


def _extension(filename: str, content_type: str) -> str:
    ext = os.path.splitext(filename)[1].lower()
    if ext:
        return ext
    return mimetypes.guess_extension(content_type.split(";")[0].strip()) or ""


class S3AssetStore(AssetStore):
    """Stores listing media as objects in a single bucket."""

    def __init__(
        self,
        bucket: str = settings.s3_bucket,
        prefix: str = settings.s3_prefix,
        region: str = settings.aws_region,
        public_base_url: str | None = settings.asset_public_base_url,
        client=None,
    ) -> None:
        self._bucket = bucket
        self._prefix = prefix.strip("/")
        self._region = region
        self._public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self._client = client or build_s3_client(region)

    def _key_for(self, filename: str, content_type: str) -> str:
        name = f"listing-{uuid.uuid4().hex}{_extension(filename, content_type)}"
        return f"{self._prefix}/{name}" if self._prefix else name

    def _url_for(self, key: str) -> str:
        if self._public_base_url:
            return f"{self._public_base_url}/{key}"
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    async def upload(self, data: bytes, content_type: str, filename: str = "") -> StoredAsset:
        key = self._key_for(filename, content_type)
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(
                None,
                partial(
                    self._client.put_object,
                    Bucket=self._bucket,
                    Key=key,
                    Body=data,
                    ContentType=content_type or "application/octet-stream",
                ),
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("s3_upload_failed", bucket=self._bucket, key=key, error=str(exc))
            raise AssetStoreError(f"Failed to upload {filename or key}: {exc}") from exc

        logger.debug("s3_object_uploaded", bucket=self._bucket, key=key, size=len(data))
        return StoredAsset(handle=key, url=self._url_for(key))

    async def delete(self, handle: str) -> bool:
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(
                None, partial(self._client.head_object, Bucket=self._bucket, Key=handle)
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                return False
            raise AssetStoreError(f"Failed to look up {handle}: {exc}") from exc
        except BotoCoreError as exc:
            raise AssetStoreError(f"Failed to look up {handle}: {exc}") from exc

        try:
            await loop.run_in_executor(
                None, partial(self._client.delete_object, Bucket=self._bucket, Key=handle)
            )
        except (BotoCoreError, ClientError) as exc:
            raise AssetStoreError(f"Failed to delete {handle}: {exc}") from exc

        logger.debug("s3_object_deleted", bucket=self._bucket, key=handle)
        return True
