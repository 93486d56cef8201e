"""
Row Store Abstract Base Class

The persistence collaborator seen by the flows: named tables of plain
dict rows with equality filters, multi-column ordering and single-row
inserts. The storefront never relies on anything richer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence


class StoreError(Exception):
    """A read or write against the store failed."""

    def __init__(self, operation: str, table: str, reason: str):
        super().__init__(f"{operation} on '{table}' failed: {reason}")
        self.operation = operation
        self.table = table
        self.reason = reason


@dataclass(frozen=True)
class OrderBy:
    """One ordering term. NULLs sort last in either direction."""
    column: str
    descending: bool = False


class BaseRowStore(ABC):
    """
    Abstract base class for row stores.

    Example:
        >>> rows = await store.select(
        ...     "pedidos",
        ...     filters={"user_id": user_id},
        ...     order_by=[OrderBy("created_at", descending=True)],
        ... )
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the store name (e.g. "mock", "database")."""
        pass

    @abstractmethod
    async def select(
        self,
        table: str,
        *,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[dict[str, Any]] = None,
        order_by: Sequence[OrderBy] = (),
    ) -> list[dict[str, Any]]:
        """
        Read rows.

        Args:
            table: Table name
            columns: Columns to return (all when None)
            filters: Column → value equality conditions, AND-ed
            order_by: Ordering terms, applied in sequence

        Raises:
            StoreError: If the read fails
        """
        pass

    @abstractmethod
    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert one row atomically.

        Returns:
            The stored row, including generated `id` and `created_at`

        Raises:
            StoreError: If the write fails (nothing is stored)
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify the store is reachable."""
        pass

    async def prepare(self) -> None:
        """Startup hook (e.g. create tables)."""
        return None

    async def close(self) -> None:
        """Release any held connections."""
        return None
