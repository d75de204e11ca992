from fastapi import APIRouter
from sqlalchemy import text

from listing_wizard.config import settings
from listing_wizard.infrastructure.database.connection import AsyncSessionLocal

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    """Liveness plus a database round trip. The asset store and broker are reported from configuration only."""
    db_status = "connected"
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as exc:
        db_status = f"error: {exc}"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
        "asset_store": settings.asset_store_backend,
        "events": "enabled" if settings.events_enabled else "disabled",
    }
