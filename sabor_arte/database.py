"""
Database Connection Module
Builds the SQLAlchemy async engine for the storefront tables.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import DeclarativeBase


# Base class for all our models
class Base(DeclarativeBase):
    pass


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for the given URL.

    The engine is owned by whoever builds it (the database row store)
    and must be disposed on shutdown.
    """
    options = {"echo": echo}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=5,  # Connection pool size
            max_overflow=10,  # Extra connections when pool is full
            pool_pre_ping=True,
        )
    return create_async_engine(database_url, **options)


async def init_db(engine: AsyncEngine) -> None:
    """
    Create all tables in database.
    Called once at application startup when DATABASE_CREATE_TABLES is set.
    """
    # Register the models on Base.metadata
    from sabor_arte import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
