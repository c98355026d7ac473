# POS Models

from .catalog import CatalogItem, CatalogSearchResponse
from .promotion import Promotion, PromotionRecord, ApplyPromotionRequest, normalize_code
from .cart import (
    Cart,
    CartTotals,
    CartView,
    CartResponse,
    CustomerRef,
    OrderLine,
    OrderLineView,
    OrderMode,
    AddCatalogItemRequest,
    AddCustomItemRequest,
    UpdateNoteRequest,
    SetCustomerRequest,
    SetContextRequest,
    SetManualDiscountRequest,
    round_money,
)
from .settlement import (
    PaymentMethod,
    SettlementState,
    GuestContext,
    DetectedReservation,
    SettlementContext,
    ChooseMethodRequest,
    ConfirmRequest,
    SettlementView,
)
from .order import (
    OrderPayload,
    OrderReceipt,
    OrderItemsUpdate,
    StoredOrder,
    OpenOrderEditRequest,
    ExistingLineView,
    OrderEditView,
)
from .outcome import Notification, NotificationKind, Outcome, OutcomeStatus

__all__ = [
    "CatalogItem",
    "CatalogSearchResponse",
    "Promotion",
    "PromotionRecord",
    "ApplyPromotionRequest",
    "normalize_code",
    "Cart",
    "CartTotals",
    "CartView",
    "CartResponse",
    "CustomerRef",
    "OrderLine",
    "OrderLineView",
    "OrderMode",
    "AddCatalogItemRequest",
    "AddCustomItemRequest",
    "UpdateNoteRequest",
    "SetCustomerRequest",
    "SetContextRequest",
    "SetManualDiscountRequest",
    "round_money",
    "PaymentMethod",
    "SettlementState",
    "GuestContext",
    "DetectedReservation",
    "SettlementContext",
    "ChooseMethodRequest",
    "ConfirmRequest",
    "SettlementView",
    "OrderPayload",
    "OrderReceipt",
    "OrderItemsUpdate",
    "StoredOrder",
    "OpenOrderEditRequest",
    "ExistingLineView",
    "OrderEditView",
    "Notification",
    "NotificationKind",
    "Outcome",
    "OutcomeStatus",
]
