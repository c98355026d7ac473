"""
Settlement Coordinator

Drives a cart from "building an order" through payment method selection to
a confirmed, persisted order:

    building -> choosing_method -> awaiting_confirmation -> settled

Nothing is persisted until confirm() succeeds. A failed confirm leaves the
coordinator in awaiting_confirmation so the cashier can retry.
"""

import re
import logging
from typing import Any, Optional

from ..core.errors import BackendError
from ..models.cart import OrderMode
from ..models.order import OrderPayload
from ..models.outcome import NotificationKind, Outcome
from ..models.settlement import (
    DetectedReservation,
    GuestContext,
    PaymentMethod,
    SettlementContext,
    SettlementState,
)
from .line_items import CartStore
from .pricing import calculate_totals

logger = logging.getLogger(__name__)

DIRECT_METHODS = [PaymentMethod.CASH, PaymentMethod.CARD, PaymentMethod.UPI]

# Guest lookup by phone needs a full mobile number
MIN_PHONE_DIGITS = 10


def guest_context_for(store: CartStore) -> GuestContext:
    """Build the guest lookup context from the cart's table and customer"""
    cart = store.cart
    phone = None
    if cart.customer and cart.customer.phone:
        digits = re.sub(r"\D", "", cart.customer.phone)
        if len(digits) >= MIN_PHONE_DIGITS:
            phone = digits
    return GuestContext(table_ref=cart.table_ref, phone=phone)


def order_source(store: CartStore) -> str:
    """Label shown to the kitchen and on reports for this order"""
    cart = store.cart
    if cart.order_mode == OrderMode.DINE_IN and cart.table_ref:
        return f"Table {cart.table_ref}"
    if cart.order_mode == OrderMode.ROOM_SERVICE and cart.table_ref:
        return f"Room {cart.table_ref}"
    return cart.order_mode.value.replace("_", " ").title()


class SettlementCoordinator:
    """State machine over a single active cart"""

    def __init__(self, store: CartStore, backend: Any):
        self.store = store
        self.backend = backend
        self.state = SettlementState.BUILDING
        self.context = SettlementContext()
        self.busy = False
        self.last_order_id: Optional[str] = None
        # Bumped on cancel so a late confirm result is ignored
        self._attempt = 0

    @property
    def is_building(self) -> bool:
        return self.state == SettlementState.BUILDING

    @property
    def detected_reservation(self) -> Optional[DetectedReservation]:
        return self.context.detected_reservation

    def available_methods(self) -> list[PaymentMethod]:
        """Payment methods offered in the current context"""
        methods = list(DIRECT_METHODS)
        if self.context.detected_reservation is not None:
            methods.append(PaymentMethod.ROOM_CHARGE)
        return methods

    async def begin(self, context: Optional[GuestContext] = None) -> Outcome:
        """Move to payment method selection"""
        if self.state != SettlementState.BUILDING:
            return Outcome.rejected(f"Cannot start settlement from {self.state.value}")

        if context is None:
            context = guest_context_for(self.store)

        self.context = SettlementContext(
            detected_reservation=await self._detect_guest(context),
        )
        self.state = SettlementState.CHOOSING_METHOD
        return Outcome.ok("Choose a payment method")

    async def _detect_guest(self, context: GuestContext) -> Optional[DetectedReservation]:
        if context.is_empty:
            return None
        try:
            reservation = await self.backend.detect_active_guest(context)
        except BackendError as e:
            # No room charge offered when the lookup fails
            logger.warning(f"Guest detection failed: {e}")
            return None

        if reservation:
            logger.info(
                f"Guest detected in {reservation.room_name}: {reservation.guest_name}"
            )
        return reservation

    def choose_method(self, method: PaymentMethod) -> Outcome:
        """Pick how the order will be paid"""
        if self.state != SettlementState.CHOOSING_METHOD:
            return Outcome.rejected(f"Cannot choose a payment method from {self.state.value}")

        if method not in self.available_methods():
            return Outcome.validation_failed(
                "Room charge requires an in-house guest for this table or room"
            )

        self.context.method = method
        self.state = SettlementState.AWAITING_CONFIRMATION
        return Outcome.ok(f"Payment method set to {method.value}")

    def back(self) -> Outcome:
        """Return from method selection to the order pad"""
        if self.state != SettlementState.CHOOSING_METHOD:
            return Outcome.rejected(f"Cannot go back from {self.state.value}")

        self.state = SettlementState.BUILDING
        self.context = SettlementContext()
        return Outcome.ok()

    def cancel(self) -> Outcome:
        """Abandon settlement without side effects"""
        if self.state == SettlementState.SETTLED:
            return Outcome.rejected("Order is already settled")

        if self.busy:
            logger.info("Settlement cancelled while a confirm request is in flight")

        self._attempt += 1
        self.state = SettlementState.BUILDING
        self.context = SettlementContext()
        return Outcome.ok("Settlement cancelled")

    def build_payload(self, send_bill: bool = False) -> OrderPayload:
        """Finalize the order payload from freshly computed totals"""
        cart = self.store.cart
        totals = calculate_totals(cart)
        method = self.context.method

        return OrderPayload(
            lines=[line.model_copy() for line in cart.lines],
            subtotal=totals.subtotal,
            discount=totals.discount,
            total=totals.total,
            method=method,
            order_mode=cart.order_mode,
            source=order_source(self.store),
            promotion_code=cart.applied_promotion.code if cart.applied_promotion else None,
            manual_discount_percentage=cart.manual_discount_percentage,
            customer=cart.customer if send_bill else None,
            reservation=(
                self.context.detected_reservation
                if method == PaymentMethod.ROOM_CHARGE
                else None
            ),
        )

    async def confirm(self, send_bill: bool = False) -> Outcome:
        """Persist the order and clear the cart on success"""
        if self.busy:
            return Outcome.rejected("A settlement request is already in progress")

        if self.state != SettlementState.AWAITING_CONFIRMATION:
            return Outcome.rejected(f"Cannot confirm from {self.state.value}")

        cart = self.store.cart
        if not cart.lines:
            return Outcome.validation_failed("Cannot settle an empty order")

        if send_bill:
            customer = cart.customer
            if customer is None or not (customer.phone or customer.email):
                return Outcome.validation_failed(
                    "Sending the bill requires a customer phone or email"
                )

        payload = self.build_payload(send_bill)
        attempt = self._attempt
        self.busy = True
        try:
            receipt = await self.backend.create_order(payload)
        except BackendError as e:
            if attempt != self._attempt:
                return Outcome.rejected("Settlement was cancelled")
            logger.warning(f"Settlement failed ({payload.method.value}, {payload.total}): {e}")
            return Outcome.failed(
                f"Payment could not be completed: {e}",
                notification=NotificationKind.SETTLEMENT_FAILED,
            )
        finally:
            self.busy = False

        if attempt != self._attempt:
            logger.info(f"Ignoring result of cancelled settlement (order {receipt.order_id})")
            return Outcome.rejected("Settlement was cancelled")

        self.context.final_total = payload.total
        self.last_order_id = receipt.order_id
        self.state = SettlementState.SETTLED
        self.store.clear()

        logger.info(
            f"Order {receipt.order_id} settled: {payload.total} via {payload.method.value}"
        )
        return Outcome.ok(
            f"Order {receipt.order_id} completed",
            notification=NotificationKind.SETTLEMENT_SUCCEEDED,
            order_id=receipt.order_id,
        )
