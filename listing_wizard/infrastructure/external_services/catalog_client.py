"""HTTP client for the category catalog service."""

import httpx
import structlog

from listing_wizard.application.interfaces.catalog import CatalogLookup
from listing_wizard.config import settings
from listing_wizard.domain.exceptions import CatalogUnavailableError, ListingValidationError

logger = structlog.get_logger(__name__)


class CatalogClient(CatalogLookup):
    """Thin HTTP wrapper around the catalog REST API."""

    def __init__(
        self,
        base_url: str = settings.catalog_api_url,
        api_key: str = settings.catalog_api_key,
        timeout: float = settings.catalog_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._headers = {"x-api-key": api_key} if api_key else {}

    async def ensure_active(self, category: str, subcategory: str) -> None:
        """
        The catalog answers GET /categories/{category}/subcategories/{subcategory}
        with a JSON body carrying an is_active flag.
        """
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.get(
                    f"{self._base_url}/categories/{category}/subcategories/{subcategory}",
                    headers=self._headers,
                )
                if response.status_code == 404:
                    raise ListingValidationError(
                        f"Unknown category/subcategory: {category}/{subcategory}",
                        fields=["category", "subcategory"],
                    )
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "catalog_request_failed",
                    status_code=exc.response.status_code,
                    category=category,
                    subcategory=subcategory,
                )
                raise CatalogUnavailableError(
                    f"Catalog returned {exc.response.status_code}"
                ) from exc
            except httpx.RequestError as exc:
                logger.error("catalog_connection_failed", error=str(exc))
                raise CatalogUnavailableError(f"Failed to reach catalog: {exc}") from exc

        if not data.get("is_active", False):
            raise ListingValidationError(
                f"Category/subcategory is not active: {category}/{subcategory}",
                fields=["category", "subcategory"],
            )
        logger.debug("catalog_placement_verified", category=category, subcategory=subcategory)
