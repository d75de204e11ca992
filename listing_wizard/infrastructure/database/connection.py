from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from listing_wizard.config import settings

_ASYNC_SCHEME = "postgresql+asyncpg://"


def async_database_url(url: str) -> str:
    """Point plain postgres URLs (as most hosting platforms hand them out) at asyncpg."""
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            return _ASYNC_SCHEME + url[len(scheme):]
    return url


engine = create_async_engine(
    async_database_url(settings.database_url),
    echo=settings.db_echo,
    pool_pre_ping=True,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Declarative base for the listings, listing_variations and listing_images tables."""


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """One unit of work per request: commit on success, roll back on any error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
