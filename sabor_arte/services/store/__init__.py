"""
Row Store Factory

Provides a single entry point for building the row store.
Automatically selects the in-memory or database store based on ENV_MODE.

Environment Switching:
    - ENV_MODE=development → MockRowStore seeded with the demo menu
    - ENV_MODE=staging/production → DatabaseRowStore (Supabase Postgres)
"""

import logging

from sabor_arte.core.config import Settings
from sabor_arte.services.store.base import BaseRowStore, OrderBy, StoreError
from sabor_arte.services.store.mock import MockRowStore, DEMO_MENU
from sabor_arte.services.store.database import DatabaseRowStore

logger = logging.getLogger(__name__)


def build_row_store(settings: Settings) -> BaseRowStore:
    """
    Build the configured row store.

    Raises:
        ValueError: If real services are selected but DATABASE_URL is missing
    """
    if settings.is_development:
        logger.info("Row Store: Using MockRowStore (development mode)")
        return MockRowStore(seed={"menu": DEMO_MENU})

    logger.info(
        f"Row Store: Using DatabaseRowStore "
        f"({settings.env_mode.value} mode)"
    )
    return DatabaseRowStore(settings)


__all__ = [
    "build_row_store",
    "BaseRowStore",
    "OrderBy",
    "StoreError",
    "MockRowStore",
    "DatabaseRowStore",
    "DEMO_MENU",
]
