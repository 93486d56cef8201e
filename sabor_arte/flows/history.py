"""
Order History Reader

A caller's own orders, newest first. The owner filter comes from the
resolved identity only. One corrupt row fails the whole request rather
than silently dropping an order from the list.
"""

import logging

from sabor_arte.core.exceptions import PersistenceError
from sabor_arte.flows.gateway import Identity
from sabor_arte.flows.orders import order_from_row
from sabor_arte.models import Order
from sabor_arte.schemas import OrderResponse
from sabor_arte.services.store import BaseRowStore, OrderBy, StoreError

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = ("id", "user_id", "total", "status", "created_at", "items_json", "details_json")


class OrderHistoryReader:

    def __init__(self, store: BaseRowStore):
        self._store = store

    async def list_for(self, identity: Identity) -> list[OrderResponse]:
        try:
            rows = await self._store.select(
                Order.__tablename__,
                columns=HISTORY_COLUMNS,
                filters={"user_id": identity.user_id},
                order_by=[
                    OrderBy("created_at", descending=True),
                    OrderBy("id", descending=True),
                ],
            )
        except StoreError as e:
            raise PersistenceError("Failed to load your orders.", detail=str(e))

        logger.debug(f"Loaded {len(rows)} orders for {identity.user_id}")
        return [order_from_row(row) for row in rows]
