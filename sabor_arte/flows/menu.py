"""
Menu Reader

Full menu grouped by category. Rows are ordered by category then id at
the store, and groups are filled in that order, which keeps the result
identical across calls. Items without a category go to a trailing
"Outros" group in id order.
"""

import logging

from sabor_arte.core.exceptions import PersistenceError
from sabor_arte.models import MenuItem
from sabor_arte.schemas import MenuItemResponse
from sabor_arte.services.store import BaseRowStore, OrderBy, StoreError

logger = logging.getLogger(__name__)

# Bucket for items without a category
FALLBACK_CATEGORY = "Outros"


class MenuReader:

    def __init__(self, store: BaseRowStore):
        self._store = store

    async def grouped(self) -> dict[str, list[MenuItemResponse]]:
        try:
            rows = await self._store.select(
                MenuItem.__tablename__,
                order_by=[OrderBy("category"), OrderBy("id")],
            )
        except StoreError as e:
            logger.error(f"Menu load failed - {e}")
            raise PersistenceError("Failed to load the menu.", detail=str(e))

        menu: dict[str, list[MenuItemResponse]] = {}
        uncategorized: list[MenuItemResponse] = []
        for row in rows:
            item = MenuItemResponse.model_validate(row)
            if item.category:
                menu.setdefault(item.category, []).append(item)
            else:
                uncategorized.append(item)

        # NULL and "" sort at opposite ends of the store order
        if uncategorized:
            menu.setdefault(FALLBACK_CATEGORY, []).extend(sorted(uncategorized, key=lambda item: item.id))

        return menu
