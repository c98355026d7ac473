"""Order storage"""

import uuid
from datetime import datetime
from typing import Optional

from ..models.order import OrderItemsUpdate, OrderPayload, StoredOrder
from ..services.pricing import calculate_subtotal


class OrderDatabase:
    """In-memory order storage"""

    def __init__(self):
        self.orders: dict[str, StoredOrder] = {}

    def create_order(self, payload: OrderPayload) -> StoredOrder:
        """Create an order from a settled cart"""
        now = datetime.utcnow()

        order = StoredOrder(
            order_id=f"ORD-{uuid.uuid4().hex[:8].upper()}",
            status="completed",
            lines=[line.model_copy() for line in payload.lines],
            total=payload.total,
            payment_method=payload.method,
            order_mode=payload.order_mode,
            source=payload.source,
            created_at=now,
            updated_at=now,
        )

        self.orders[order.order_id] = order
        return order

    def get_order(self, order_id: str) -> Optional[StoredOrder]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def update_items(self, order_id: str, update: OrderItemsUpdate) -> Optional[StoredOrder]:
        """Delete and insert order lines in one step"""
        order = self.get_order(order_id)
        if not order:
            return None

        to_delete = set(update.to_delete)
        order.lines = [line for line in order.lines if line.id not in to_delete]
        order.lines.extend(line.model_copy() for line in update.to_insert)
        order.total = calculate_subtotal(order.lines)
        order.updated_at = datetime.utcnow()
        return order
