"""
Pricing & Discount Calculator

Pure functions over cart state. Nothing here is stored; totals are
recomputed every time they are read.
"""

from decimal import Decimal
from typing import Iterable, Optional

from ..models.cart import Cart, CartTotals, OrderLine
from ..models.promotion import Promotion

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def line_total(line: OrderLine) -> Decimal:
    """Price of a single line"""
    return line.unit_price * line.quantity


def calculate_subtotal(lines: Iterable[OrderLine]) -> Decimal:
    """Sum of unit price x quantity over all lines"""
    return sum((line_total(line) for line in lines), ZERO)


def calculate_discount(promotion: Optional[Promotion], subtotal: Decimal) -> Decimal:
    """
    Discount granted by a promotion.

    A percentage promotion wins over a fixed amount; a fixed amount never
    exceeds the subtotal.
    """
    if promotion is None:
        return ZERO

    if promotion.discount_percentage is not None:
        return subtotal * promotion.discount_percentage / HUNDRED

    if promotion.discount_amount is not None:
        return min(promotion.discount_amount, subtotal)

    return ZERO


def calculate_manual_discount(percentage: Optional[Decimal], subtotal: Decimal) -> Decimal:
    """Cashier discount, a percentage of the subtotal"""
    if not percentage:
        return ZERO
    return subtotal * percentage / HUNDRED


def calculate_totals(cart: Cart) -> CartTotals:
    """
    Derive subtotal, discounts and total for a cart.

    The promotion and the manual discount are both taken from the subtotal
    and added up; together they never exceed it.
    """
    subtotal = calculate_subtotal(cart.lines)
    promotion_discount = calculate_discount(cart.applied_promotion, subtotal)
    manual_discount = calculate_manual_discount(cart.manual_discount_percentage, subtotal)
    discount = min(promotion_discount + manual_discount, subtotal)
    total = max(ZERO, subtotal - discount)
    return CartTotals(
        subtotal=subtotal,
        promotion_discount=promotion_discount,
        manual_discount=manual_discount,
        discount=discount,
        total=total,
    )
