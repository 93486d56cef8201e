"""
Database Row Store Implementation

Production store on the Supabase Postgres database through the
SQLAlchemy async engine. Used when ENV_MODE=production or ENV_MODE=staging.

Tables are the ones declared in `sabor_arte.models`; statements are
built with SQLAlchemy Core so rows come back as plain dicts, the same
shape the mock store returns.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Sequence, TypeVar

from sqlalchemy import Table, insert, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from sabor_arte import models  # noqa: F401  (registers tables on Base.metadata)
from sabor_arte.core.config import Settings
from sabor_arte.database import Base, create_engine, init_db
from sabor_arte.services.store.base import BaseRowStore, OrderBy, StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DatabaseRowStore(BaseRowStore):
    """
    SQLAlchemy implementation of the row store.

    Every statement runs in its own connection; inserts run inside a
    transaction, so a failed insert leaves nothing behind.

    Example:
        >>> store = DatabaseRowStore(settings)
        >>> row = await store.insert("pedidos", {...})
        >>> row["id"], row["created_at"]
    """

    def __init__(self, settings: Settings, engine: Optional[AsyncEngine] = None):
        """
        Raises:
            ValueError: If no engine is given and DATABASE_URL is not configured
        """
        if engine is None:
            if not settings.database_url:
                raise ValueError(
                    "DATABASE_URL is required for production mode. "
                    "Set it in your .env file or environment variables."
                )
            engine = create_engine(settings.database_url, echo=settings.database_echo)

        self._engine = engine
        self._timeout = settings.external_call_timeout
        self._create_tables = settings.database_create_tables

        logger.info(f"DatabaseRowStore initialized ({engine.dialect.name})")

    @property
    def provider_name(self) -> str:
        """Return the store name."""
        return "database"

    def _table(self, name: str) -> Table:
        try:
            return Base.metadata.tables[name]
        except KeyError:
            raise StoreError("lookup", name, "unknown table")

    async def _run(self, operation: str, table: str, work: Callable[[], Awaitable[T]]) -> T:
        """Execute `work` bounded by the external call timeout."""
        try:
            return await asyncio.wait_for(work(), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.error(f"Database: {operation} on {table} timed out after {self._timeout}s")
            raise StoreError(operation, table, "timed out")
        except SQLAlchemyError as e:
            logger.error(f"Database: {operation} on {table} failed - {e}")
            raise StoreError(operation, table, str(e)) from e

    async def select(
        self,
        table: str,
        *,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[dict[str, Any]] = None,
        order_by: Sequence[OrderBy] = (),
    ) -> list[dict[str, Any]]:
        target = self._table(table)

        try:
            selected = [target.c[name] for name in columns] if columns else list(target.c)
            query = select(*selected)
            for name, value in (filters or {}).items():
                query = query.where(target.c[name] == value)
            for term in order_by:
                column = target.c[term.column]
                query = query.order_by(
                    (column.desc() if term.descending else column.asc()).nulls_last()
                )
        except KeyError as e:
            raise StoreError("select", table, f"unknown column {e}")

        async def work() -> list[dict[str, Any]]:
            async with self._engine.connect() as conn:
                result = await conn.execute(query)
                return [dict(row._mapping) for row in result]

        return await self._run("select", table, work)

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        target = self._table(table)
        statement = insert(target).values(**row).returning(*target.c)

        async def work() -> dict[str, Any]:
            async with self._engine.begin() as conn:
                result = await conn.execute(statement)
                return dict(result.one()._mapping)

        stored = await self._run("insert", table, work)
        logger.debug(f"Database: Inserted row {stored.get('id')} into {table}")
        return stored

    async def health_check(self) -> bool:
        """Run a trivial query."""
        async def work() -> None:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

        try:
            await self._run("health_check", "-", work)
        except StoreError:
            return False
        return True

    async def prepare(self) -> None:
        if self._create_tables:
            await init_db(self._engine)
            logger.info("Database: Tables created")

    async def close(self) -> None:
        await self._engine.dispose()
