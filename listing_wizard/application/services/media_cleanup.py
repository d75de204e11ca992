"""
Best-effort removal of media handles from the asset store.

Deletes run concurrently. Every failure is collected and logged as a
MediaCleanupError; nothing here raises.
"""
import asyncio
from uuid import UUID

import structlog

from listing_wizard.application.interfaces.asset_store import AssetStore
from listing_wizard.domain.exceptions import MediaCleanupError

logger = structlog.get_logger(__name__)


async def purge_media(
    asset_store: AssetStore,
    handles: list[str],
    *,
    listing_id: UUID,
    reason: str,
) -> list[MediaCleanupError]:
    """Attempt to delete every handle once. Returns the failures."""
    unique_handles = list(dict.fromkeys(h for h in handles if h))
    if not unique_handles:
        return []

    results = await asyncio.gather(
        *(asset_store.delete(handle) for handle in unique_handles),
        return_exceptions=True,
    )

    failures: list[MediaCleanupError] = []
    for handle, result in zip(unique_handles, results):
        if isinstance(result, Exception):
            failure = MediaCleanupError(handle, result)
            failures.append(failure)
            logger.error(
                "media_cleanup_failed",
                listing_id=str(listing_id),
                handle=handle,
                reason=reason,
                error=str(result),
            )
        elif result is False:
            logger.info(
                "media_already_deleted",
                listing_id=str(listing_id),
                handle=handle,
                reason=reason,
            )

    logger.info(
        "media_purged",
        listing_id=str(listing_id),
        reason=reason,
        attempted=len(unique_handles),
        failed=len(failures),
    )
    return failures
