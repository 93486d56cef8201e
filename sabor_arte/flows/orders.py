"""
Order Submission Flow

Persists a validated cart as one row. The owner is always the caller's
resolved identity; any owner-like field in the request body is ignored.

The client-submitted total is stored as given. It is not recomputed
from the cart lines.
"""

import logging
from typing import Any

from sabor_arte.core.exceptions import DataIntegrityError, PersistenceError
from sabor_arte.flows.gateway import Identity
from sabor_arte.models import FinalizedOrder, Order, OrderStatus
from sabor_arte.schemas import (
    FinalizeOrderCreate,
    FinalizedOrderResponse,
    OrderCreate,
    OrderResponse,
    decode_cart_lines,
    decode_details,
    encode_cart_lines,
    encode_details,
)
from sabor_arte.services.store import BaseRowStore, StoreError

logger = logging.getLogger(__name__)


# =============================================================================
# ROW MAPPING
# =============================================================================

def order_from_row(row: dict[str, Any]) -> OrderResponse:
    """
    Rebuild an order from its stored row.

    Raises:
        DataIntegrityError: If the stored item or detail payload is corrupt
    """
    try:
        items = decode_cart_lines(row.get("items_json"))
        details = decode_details(row.get("details_json"))
    except ValueError as e:
        logger.error(f"Corrupt payload in {Order.__tablename__} row {row.get('id')} - {e}")
        raise DataIntegrityError(
            f"Stored order #{row.get('id')} is corrupt.",
            detail=str(e),
        )

    return OrderResponse(
        id=row["id"],
        user_id=row["user_id"],
        items=items,
        details=details,
        total=row["total"],
        status=row["status"],
        created_at=row.get("created_at"),
    )


def finalized_order_from_row(row: dict[str, Any]) -> FinalizedOrderResponse:
    """
    Rebuild a finalized order from its stored row.

    Raises:
        DataIntegrityError: If the stored item payload is corrupt
    """
    try:
        items = decode_cart_lines(row.get("items_json"))
    except ValueError as e:
        logger.error(f"Corrupt payload in {FinalizedOrder.__tablename__} row {row.get('id')} - {e}")
        raise DataIntegrityError(
            f"Stored order #{row.get('id')} is corrupt.",
            detail=str(e),
        )

    return FinalizedOrderResponse(
        id=row["id"],
        user_id=row["user_id"],
        name=row["nome"],
        phone=row["telefone"],
        address=row["endereco"],
        payment_method=row["pagamento"],
        notes=row.get("observacoes"),
        items=items,
        total=row["total"],
        created_at=row.get("created_at"),
    )


# =============================================================================
# FLOW
# =============================================================================

class OrderSubmissionFlow:
    """Cart checkout, with or without delivery details."""

    def __init__(self, store: BaseRowStore):
        self._store = store

    async def submit(self, identity: Identity, order: OrderCreate) -> OrderResponse:
        """Store a cart as a Pending order owned by `identity`."""
        logger.info(f"Creating order for {identity.user_id} ({len(order.items)} lines)")

        try:
            row = await self._store.insert(
                Order.__tablename__,
                {
                    "user_id": identity.user_id,
                    "items_json": encode_cart_lines(order.items),
                    "details_json": encode_details(order.details),
                    "total": order.total,
                    "status": OrderStatus.PENDING.value,
                },
            )
        except StoreError as e:
            raise PersistenceError("Failed to place the order.", detail=str(e))

        logger.info(f"Order #{row['id']} created successfully")
        return order_from_row(row)

    async def finalize(self, identity: Identity, order: FinalizeOrderCreate) -> FinalizedOrderResponse:
        """Store a checkout with delivery details owned by `identity`."""
        logger.info(f"Finalizing checkout for {identity.user_id} ({len(order.items)} lines)")

        try:
            row = await self._store.insert(
                FinalizedOrder.__tablename__,
                {
                    "user_id": identity.user_id,
                    "nome": order.name,
                    "telefone": order.phone,
                    "endereco": order.address,
                    "pagamento": order.payment,
                    "observacoes": order.notes or None,
                    "items_json": encode_cart_lines(order.items),
                    "total": order.total,
                },
            )
        except StoreError as e:
            raise PersistenceError("Failed to finalize the order.", detail=str(e))

        logger.info(f"Finalized order #{row['id']} created successfully")
        return finalized_order_from_row(row)
