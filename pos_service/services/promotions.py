"""Promotion code resolution for a cart"""

import logging
from typing import Any, Callable, Optional

from ..core.errors import BackendError
from ..models.cart import Cart
from ..models.outcome import NotificationKind, Outcome
from ..models.promotion import Promotion, normalize_code

logger = logging.getLogger(__name__)


class PromotionResolver:
    """
    Applies at most one promotion to a cart.

    Applying a new code replaces the current promotion. Unknown, expired
    or exhausted codes leave the cart untouched. The optional guard is
    consulted after the lookup returns; a non-None outcome from it aborts
    the apply.
    """

    def __init__(
        self,
        cart: Cart,
        backend: Any,
        guard: Optional[Callable[[], Optional[Outcome]]] = None,
    ):
        self.cart = cart
        self.backend = backend
        self.guard = guard

    async def apply(self, code: str) -> Outcome:
        """Look up a code and apply it to the cart"""
        normalized = normalize_code(code)
        if not normalized:
            return Outcome.not_applied(
                "Enter a promotion code",
                notification=NotificationKind.PROMOTION_INVALID,
            )

        try:
            promotion = await self.backend.resolve_promotion(normalized)
        except BackendError as e:
            logger.error(f"Promotion lookup failed for {normalized}: {e}")
            return Outcome.not_applied(
                "Could not verify the promotion code, try again",
                notification=NotificationKind.PROMOTION_INVALID,
            )

        # The cart may have been locked while the lookup was in flight
        if self.guard is not None:
            locked = self.guard()
            if locked is not None:
                logger.info(f"Discarding promotion {normalized}: cart is locked")
                return locked

        if promotion is None:
            logger.warning(f"Promotion code rejected: {normalized}")
            return Outcome.not_applied(
                f"Promotion code {normalized} is invalid or expired",
                notification=NotificationKind.PROMOTION_INVALID,
            )

        self.cart.applied_promotion = promotion
        logger.info(f"Applied promotion {promotion.code} ({promotion.name})")
        return Outcome.ok(f"Promotion {promotion.code} applied")

    def remove(self) -> Outcome:
        self.cart.applied_promotion = None
        return Outcome.ok("Promotion removed")

    async def list_active(self) -> list[Promotion]:
        """Promotions currently offered in the code picker"""
        try:
            return await self.backend.list_active_promotions()
        except BackendError as e:
            logger.error(f"Could not load active promotions: {e}")
            return []
