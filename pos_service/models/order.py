"""Order persistence models"""

from decimal import Decimal
from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from .cart import CustomerRef, OrderLine, OrderLineView, OrderMode
from .settlement import DetectedReservation, PaymentMethod


class OrderPayload(BaseModel):
    """Finalized order handed to the order persistence collaborator"""
    lines: list[OrderLine]
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    method: PaymentMethod
    order_mode: OrderMode
    source: str
    promotion_code: Optional[str] = None
    manual_discount_percentage: Optional[Decimal] = None
    customer: Optional[CustomerRef] = None
    reservation: Optional[DetectedReservation] = None


class OrderReceipt(BaseModel):
    """Result of creating an order"""
    order_id: str


class OrderItemsUpdate(BaseModel):
    """Separate delete and insert sets for an order edit"""
    to_delete: list[str] = []
    to_insert: list[OrderLine] = []


class StoredOrder(BaseModel):
    """Order as held by the persistence collaborator"""
    order_id: str
    status: str = "completed"
    lines: list[OrderLine]
    total: Decimal
    payment_method: Optional[PaymentMethod] = None
    order_mode: Optional[OrderMode] = None
    source: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OpenOrderEditRequest(BaseModel):
    """Request to start editing a persisted order"""
    order_id: str


class ExistingLineView(OrderLineView):
    """Persisted order line with its removal mark"""
    index: int
    marked_for_removal: bool


class OrderEditView(BaseModel):
    """Pending edit of a persisted order"""
    edit_id: str
    order_id: str
    existing_items: list[ExistingLineView]
    new_items: list[OrderLineView]
    projected_total: Decimal
    busy: bool
    has_changes: bool
