"""In-memory backend collaborators"""

import logging
from typing import Optional

from ..core.errors import OrderNotFoundError
from ..models.catalog import CatalogItem
from ..models.order import OrderItemsUpdate, OrderPayload, OrderReceipt, StoredOrder
from ..models.promotion import Promotion
from ..models.settlement import DetectedReservation, GuestContext
from .catalog import CatalogDatabase
from .orders import OrderDatabase
from .promotions import PromotionDatabase
from .reservations import ReservationDatabase

logger = logging.getLogger(__name__)


class InMemoryBackend:
    """
    Backend collaborators held in process memory.

    Exposes the same async methods as BackendClient so the POS core does not
    care which one it talks to.
    """

    def __init__(
        self,
        catalog: Optional[CatalogDatabase] = None,
        promotions: Optional[PromotionDatabase] = None,
        reservations: Optional[ReservationDatabase] = None,
        orders: Optional[OrderDatabase] = None,
    ):
        self.catalog = catalog or CatalogDatabase()
        self.promotions = promotions or PromotionDatabase()
        self.reservations = reservations or ReservationDatabase()
        self.orders = orders or OrderDatabase()

    async def close(self) -> None:
        pass

    # ==================== Catalog ====================

    async def search_catalog(self, query: Optional[str] = None) -> list[CatalogItem]:
        return self.catalog.search_items(query=query)

    async def get_catalog_item(self, item_id: str) -> Optional[CatalogItem]:
        return self.catalog.get_item(item_id)

    # ==================== Promotions ====================

    async def resolve_promotion(self, code: str) -> Optional[Promotion]:
        return self.promotions.resolve(code)

    async def list_active_promotions(self) -> list[Promotion]:
        return self.promotions.list_active()

    # ==================== Guests ====================

    async def detect_active_guest(self, context: GuestContext) -> Optional[DetectedReservation]:
        return self.reservations.detect(context)

    # ==================== Orders ====================

    async def create_order(self, payload: OrderPayload) -> OrderReceipt:
        order = self.orders.create_order(payload)
        if payload.promotion_code:
            self.promotions.record_usage(payload.promotion_code)
        logger.debug(f"Stored order {order.order_id} ({len(order.lines)} lines)")
        return OrderReceipt(order_id=order.order_id)

    async def update_order_items(self, order_id: str, update: OrderItemsUpdate) -> None:
        if self.orders.update_items(order_id, update) is None:
            raise OrderNotFoundError(f"Order {order_id} not found")

    async def get_order(self, order_id: str) -> Optional[StoredOrder]:
        return self.orders.get_order(order_id)
