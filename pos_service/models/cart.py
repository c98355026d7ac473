"""Cart models for the POS order pad"""

from decimal import Decimal, ROUND_HALF_UP
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum

from .promotion import Promotion

CENT = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    """Round a monetary value for display"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class OrderMode(str, Enum):
    DINE_IN = "dine_in"
    TAKEAWAY = "takeaway"
    DELIVERY = "delivery"
    ROOM_SERVICE = "room_service"


class OrderLine(BaseModel):
    """One catalog or custom item entry in an order"""
    id: str
    source_item_id: str
    name: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(gt=0)
    is_custom: bool = False
    note: Optional[str] = None
    category: Optional[str] = None


class CustomerRef(BaseModel):
    """Customer details attached to a cart"""
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None


class Cart(BaseModel):
    """Working order held by one POS session"""
    lines: list[OrderLine] = []
    applied_promotion: Optional[Promotion] = None
    # Cashier discount on the subtotal, stacked with the promotion
    manual_discount_percentage: Optional[Decimal] = Field(default=None, gt=0, le=100)
    customer: Optional[CustomerRef] = None
    order_mode: OrderMode = OrderMode.TAKEAWAY
    table_ref: Optional[str] = None


class CartTotals(BaseModel):
    """Derived cart totals, never stored"""
    subtotal: Decimal
    promotion_discount: Decimal
    manual_discount: Decimal
    discount: Decimal
    total: Decimal


class AddCatalogItemRequest(BaseModel):
    """Request to add a catalog item to the cart"""
    item_id: str


class AddCustomItemRequest(BaseModel):
    """Request to add an ad-hoc item"""
    name: str
    price: Decimal
    quantity: int = 1


class UpdateNoteRequest(BaseModel):
    """Request to attach a note to a line"""
    note: Optional[str] = None


class SetCustomerRequest(BaseModel):
    """Request to attach customer details"""
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None


class SetContextRequest(BaseModel):
    """Request to change the order mode or table/room reference"""
    order_mode: Optional[OrderMode] = None
    table_ref: Optional[str] = None


class SetManualDiscountRequest(BaseModel):
    """Request to set the cashier discount percentage; empty clears it"""
    percentage: Optional[Decimal] = None


class OrderLineView(BaseModel):
    """Order line as shown on the order pad"""
    id: str
    source_item_id: str
    name: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal
    is_custom: bool
    note: Optional[str] = None

    @classmethod
    def from_line(cls, line: OrderLine) -> "OrderLineView":
        return cls(
            id=line.id,
            source_item_id=line.source_item_id,
            name=line.name,
            unit_price=round_money(line.unit_price),
            quantity=line.quantity,
            line_total=round_money(line.unit_price * line.quantity),
            is_custom=line.is_custom,
            note=line.note,
        )


class CartView(BaseModel):
    """Cart with display totals"""
    lines: list[OrderLineView]
    item_count: int
    subtotal: Decimal
    promotion_discount: Decimal
    manual_discount: Decimal
    discount: Decimal
    total: Decimal
    applied_promotion: Optional[Promotion] = None
    manual_discount_percentage: Optional[Decimal] = None
    customer: Optional[CustomerRef] = None
    order_mode: OrderMode
    table_ref: Optional[str] = None
    currency: str = "INR"


class CartResponse(BaseModel):
    """Cart API response"""
    cart: CartView
    message: Optional[str] = None
