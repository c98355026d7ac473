# POS core services

from .pricing import (
    calculate_totals,
    calculate_subtotal,
    calculate_discount,
    calculate_manual_discount,
    line_total,
)
from .line_items import LineItemStore, CartStore
from .promotions import PromotionResolver
from .settlement import SettlementCoordinator
from .order_edit import OrderEditSession
from .backend_client import BackendClient

__all__ = [
    "calculate_totals",
    "calculate_subtotal",
    "calculate_discount",
    "calculate_manual_discount",
    "line_total",
    "LineItemStore",
    "CartStore",
    "PromotionResolver",
    "SettlementCoordinator",
    "OrderEditSession",
    "BackendClient",
]
