"""Async engine, session factory and the declarative base for all models."""

from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings


class Base(DeclarativeBase):
    pass


def get_engine(settings: Optional[Settings] = None) -> AsyncEngine:
    """
    Build the engine for the configured database.

    PostgreSQL (asyncpg) gets a sized connection pool; SQLite (aiosqlite)
    keeps the driver's default pool, which takes no sizing options.
    """
    settings = settings or Settings()
    options = {"echo": settings.debug, "pool_pre_ping": True}
    if settings.database_url.startswith("postgresql"):
        options.update(pool_size=5, max_overflow=10)
    return create_async_engine(settings.database_url, **options)


engine = get_engine()

# Objects stay usable after commit; services refresh what they return
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session dependency.

    Commits when the handler returns and rolls back if it raises, so an
    AdoptionError raised mid-operation leaves nothing half written.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
