"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from listing_wizard.api.routes import health, listings
from listing_wizard.config import settings
from listing_wizard.domain.exceptions import (
    AssetStoreError,
    CatalogUnavailableError,
    ConflictError,
    ListingNotFoundError,
    ListingValidationError,
)

logger = structlog.get_logger(__name__)

_ERROR_STATUS: list[tuple[type[Exception], int]] = [
    (ListingValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ListingNotFoundError, status.HTTP_404_NOT_FOUND),
    (AssetStoreError, status.HTTP_502_BAD_GATEWAY),
    (CatalogUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def configure_logging(level: str = settings.log_level) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
    )


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        content: dict = {"detail": str(exc)}
        if isinstance(exc, ListingValidationError) and exc.fields:
            content["fields"] = exc.fields
        logger.info(
            "request_rejected",
            path=request.url.path,
            error_type=type(exc).__name__,
            status_code=status_code,
        )
        return JSONResponse(status_code=status_code, content=content)

    return handler


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("listing_service_starting", asset_store=settings.asset_store_backend)
    yield
    logger.info("listing_service_stopping")


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Listing Wizard",
        description="Seller-side listing creation and management for the marketplace.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for exc_class, status_code in _ERROR_STATUS:
        app.add_exception_handler(exc_class, _error_handler(status_code))

    app.include_router(health.router)
    app.include_router(listings.router)

    return app


app = create_app()
