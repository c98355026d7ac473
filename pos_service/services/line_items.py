"""Line item storage for carts and order edit buffers"""

import uuid
import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..models.cart import Cart, CustomerRef, OrderLine, OrderMode
from ..models.catalog import CatalogItem
from ..models.outcome import Outcome

logger = logging.getLogger(__name__)


def new_line_id() -> str:
    return str(uuid.uuid4())


class LineItemStore:
    """
    Working set of order lines.

    Non-custom lines are merged by catalog item id; custom lines are always
    kept separate. Commands that reference a line id that is no longer
    present are silent no-ops.
    """

    def __init__(self, lines: Optional[list[OrderLine]] = None):
        self.lines: list[OrderLine] = lines if lines is not None else []

    def find(self, line_id: str) -> Optional[OrderLine]:
        """Get a line by ID"""
        return next((line for line in self.lines if line.id == line_id), None)

    def add_catalog_item(self, item: CatalogItem) -> Outcome:
        """Add a catalog item, merging into an existing line"""
        if not item.is_available:
            return Outcome.validation_failed(f"{item.name} is not available")

        existing_line = next(
            (
                line for line in self.lines
                if line.source_item_id == item.id and not line.is_custom
            ),
            None,
        )

        if existing_line:
            existing_line.quantity += 1
        else:
            self.lines.append(
                OrderLine(
                    id=new_line_id(),
                    source_item_id=item.id,
                    name=item.name,
                    unit_price=item.price,
                    quantity=1,
                    category=item.category,
                )
            )

        return Outcome.ok(f"{item.name} added to order")

    def add_custom_item(self, name: str, price, quantity: int = 1) -> Outcome:
        """Add an ad-hoc item; never merged with other lines"""
        name = (name or "").strip()
        if not name:
            return Outcome.validation_failed("Custom item name is required")

        try:
            unit_price = Decimal(str(price))
        except (InvalidOperation, ValueError, TypeError):
            return Outcome.validation_failed("Custom item price must be a number")

        if not unit_price.is_finite() or unit_price <= 0:
            return Outcome.validation_failed("Custom item price must be greater than zero")

        if quantity < 1:
            return Outcome.validation_failed("Custom item quantity must be at least 1")

        self.lines.append(
            OrderLine(
                id=new_line_id(),
                source_item_id=f"custom-{uuid.uuid4().hex[:12]}",
                name=name,
                unit_price=unit_price,
                quantity=quantity,
                is_custom=True,
            )
        )
        return Outcome.ok(f"{name} added to order")

    def increment(self, line_id: str) -> Outcome:
        line = self.find(line_id)
        if line:
            line.quantity += 1
        return Outcome.ok()

    def decrement(self, line_id: str) -> Outcome:
        """Decrease quantity by one, removing the line at zero"""
        line = self.find(line_id)
        if not line:
            return Outcome.ok()

        if line.quantity <= 1:
            self.lines.remove(line)
        else:
            line.quantity -= 1
        return Outcome.ok()

    def remove(self, line_id: str) -> Outcome:
        line = self.find(line_id)
        if line:
            self.lines.remove(line)
        return Outcome.ok()

    def set_note(self, line_id: str, text: Optional[str]) -> Outcome:
        line = self.find(line_id)
        if line:
            line.note = (text or "").strip() or None
        return Outcome.ok()

    def clear(self) -> None:
        # Keep the list object: a cart shares it with this store
        self.lines.clear()


class CartStore(LineItemStore):
    """Line item store bound to a cart"""

    def __init__(self, cart: Optional[Cart] = None):
        self.cart = cart if cart is not None else Cart()
        super().__init__(self.cart.lines)

    def set_customer(
        self,
        name: str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Outcome:
        """Attach customer details used for send-bill and guest lookup"""
        name = (name or "").strip()
        if not name:
            return Outcome.validation_failed("Customer name is required")

        self.cart.customer = CustomerRef(
            name=name,
            phone=(phone or "").strip() or None,
            email=(email or "").strip() or None,
        )
        return Outcome.ok("Customer added")

    def set_context(
        self,
        order_mode: Optional[OrderMode] = None,
        table_ref: Optional[str] = None,
    ) -> Outcome:
        """Update order mode and table/room reference"""
        if order_mode is not None:
            self.cart.order_mode = order_mode
        if table_ref is not None:
            self.cart.table_ref = table_ref.strip() or None
        return Outcome.ok()

    def set_manual_discount(self, percentage) -> Outcome:
        """Set the cashier discount percentage; empty or zero clears it"""
        if percentage is None or str(percentage).strip() == "":
            self.cart.manual_discount_percentage = None
            return Outcome.ok("Discount removed")

        try:
            value = Decimal(str(percentage).strip())
        except (InvalidOperation, ValueError):
            return Outcome.validation_failed("Discount must be a number")

        if not value.is_finite() or value < 0 or value > 100:
            return Outcome.validation_failed("Discount must be between 0 and 100 percent")

        if value == 0:
            self.cart.manual_discount_percentage = None
            return Outcome.ok("Discount removed")

        self.cart.manual_discount_percentage = value
        return Outcome.ok(f"{value}% discount applied")

    def clear(self) -> None:
        """Empty the cart, dropping promotion, discount and customer"""
        super().clear()
        self.cart.applied_promotion = None
        self.cart.manual_discount_percentage = None
        self.cart.customer = None
        logger.debug("Cart cleared")
