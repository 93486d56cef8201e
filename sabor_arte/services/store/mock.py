"""
Mock Row Store Implementation

In-memory stand-in for the Supabase database.
Used in development mode (ENV_MODE=development) and in tests to:
    - Run the storefront locally with a demo menu
    - Assert exactly which reads/writes a flow performed (`calls`)

Behavior:
    - Generates integer ids per table when a row has none
    - Stamps `created_at` with the current UTC time
    - Orders with NULLs last, like Postgres ascending order
"""

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from sabor_arte.services.store.base import BaseRowStore, OrderBy

logger = logging.getLogger(__name__)


DEMO_MENU = [
    {
        "id": 1,
        "name": "Moqueca de Peixe",
        "description": "Peixe ao leite de coco com dendê, arroz e pirão",
        "price": 62.0,
        "category": "Pratos Principais",
        "image_url": None,
    },
    {
        "id": 2,
        "name": "Feijoada Completa",
        "description": "Feijão preto, carnes, couve, farofa e laranja",
        "price": 54.9,
        "category": "Pratos Principais",
        "image_url": None,
    },
    {
        "id": 3,
        "name": "Suco de Maracujá",
        "description": "500 ml",
        "price": 12.0,
        "category": "Bebidas",
        "image_url": None,
    },
    {
        "id": 4,
        "name": "Guaraná",
        "description": "Lata 350 ml",
        "price": 7.5,
        "category": "Bebidas",
        "image_url": None,
    },
    {
        "id": 5,
        "name": "Pudim de Leite",
        "description": None,
        "price": 14.0,
        "category": "Sobremesas",
        "image_url": None,
    },
]


class MockRowStore(BaseRowStore):
    """
    In-memory implementation of the row store.

    Attributes:
        tables: Table name → list of rows, in insertion order
        calls: Ordered log of (operation, table) tuples

    Example:
        >>> store = MockRowStore(seed={"menu": DEMO_MENU})
        >>> rows = await store.select("menu", order_by=[OrderBy("id")])
    """

    def __init__(self, seed: Optional[dict[str, list[dict[str, Any]]]] = None):
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[tuple[str, str]] = []
        self._next_ids: dict[str, int] = {}

        for table, rows in (seed or {}).items():
            self.seed(table, rows)

        logger.info(f"MockRowStore initialized (tables={sorted(self.tables)})")

    @property
    def provider_name(self) -> str:
        """Return the store name."""
        return "mock"

    def seed(self, table: str, rows: list[dict[str, Any]]) -> None:
        """Load rows verbatim, bypassing the call log."""
        stored = self.tables.setdefault(table, [])
        for row in rows:
            stored.append(copy.deepcopy(row))
            if isinstance(row.get("id"), int):
                self._next_ids[table] = max(self._next_ids.get(table, 1), row["id"] + 1)

    def count(self, operation: str, table: Optional[str] = None) -> int:
        """Number of logged calls of one operation, optionally for one table."""
        return sum(
            1 for op, name in self.calls
            if op == operation and (table is None or name == table)
        )

    async def select(
        self,
        table: str,
        *,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[dict[str, Any]] = None,
        order_by: Sequence[OrderBy] = (),
    ) -> list[dict[str, Any]]:
        self.calls.append(("select", table))

        rows = [
            row for row in self.tables.get(table, [])
            if all(row.get(column) == value for column, value in (filters or {}).items())
        ]

        # Stable sorts applied last-term-first give multi-column ordering
        for term in reversed(order_by):
            present = [row for row in rows if row.get(term.column) is not None]
            missing = [row for row in rows if row.get(term.column) is None]
            present.sort(key=lambda row: row[term.column], reverse=term.descending)
            rows = present + missing

        if columns is not None:
            rows = [{column: row.get(column) for column in columns} for row in rows]

        return copy.deepcopy(rows)

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("insert", table))

        stored = copy.deepcopy(row)
        if stored.get("id") is None:
            next_id = self._next_ids.get(table, 1)
            stored["id"] = next_id
            self._next_ids[table] = next_id + 1
        stored.setdefault("created_at", datetime.now(timezone.utc))

        self.tables.setdefault(table, []).append(stored)
        logger.debug(f"Mock: Inserted row {stored['id']} into {table}")

        return copy.deepcopy(stored)

    async def health_check(self) -> bool:
        """Mock store is always healthy."""
        return True
