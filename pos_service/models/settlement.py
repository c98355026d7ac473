"""Settlement models"""

from decimal import Decimal
from pydantic import BaseModel
from typing import Optional
from enum import Enum


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    ROOM_CHARGE = "room_charge"


class SettlementState(str, Enum):
    BUILDING = "building"
    CHOOSING_METHOD = "choosing_method"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    SETTLED = "settled"


class GuestContext(BaseModel):
    """Table/room context used to look up an in-house guest"""
    table_ref: Optional[str] = None
    phone: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (self.table_ref or self.phone)


class DetectedReservation(BaseModel):
    """In-house guest found for the current table or room"""
    reservation_id: str
    room_id: str
    room_name: str
    guest_name: str


class SettlementContext(BaseModel):
    """Payment choice for the cart being settled"""
    method: Optional[PaymentMethod] = None
    detected_reservation: Optional[DetectedReservation] = None
    final_total: Optional[Decimal] = None


class ChooseMethodRequest(BaseModel):
    """Request to pick a payment method"""
    method: PaymentMethod


class ConfirmRequest(BaseModel):
    """Request to confirm settlement"""
    send_bill: bool = False


class SettlementView(BaseModel):
    """Settlement state as shown in the payment dialog"""
    state: SettlementState
    busy: bool
    available_methods: list[PaymentMethod]
    context: SettlementContext
    last_order_id: Optional[str] = None
