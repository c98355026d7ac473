"""POS session management"""

import uuid
import logging
from datetime import datetime
from typing import Any, Optional

from ..models.cart import Cart, CartView, OrderLineView, OrderMode, round_money
from ..models.outcome import Notification, Outcome
from ..models.settlement import SettlementState, SettlementView
from ..services.line_items import CartStore
from ..services.order_edit import OrderEditSession
from ..services.pricing import calculate_totals
from ..services.promotions import PromotionResolver
from ..services.settlement import SettlementCoordinator

logger = logging.getLogger(__name__)


class PosSession:
    """
    One POS terminal's working order.

    Owns exactly one cart together with its promotion resolver and
    settlement coordinator, plus the notifications raised by commands.
    """

    def __init__(
        self,
        backend: Any,
        order_mode: OrderMode = OrderMode.TAKEAWAY,
        currency: str = "INR",
    ):
        now = datetime.utcnow()
        self.session_id = str(uuid.uuid4())
        self.created_at = now
        self.updated_at = now
        self.backend = backend
        self.currency = currency
        self.store = CartStore(Cart(order_mode=order_mode))
        self.promotions = PromotionResolver(self.store.cart, backend, guard=self.cart_locked)
        self.settlement = SettlementCoordinator(self.store, backend)
        self.notifications: list[Notification] = []

    @property
    def cart(self) -> Cart:
        return self.store.cart

    def record(self, outcome: Outcome) -> Outcome:
        """Keep the outcome's notification for the UI shell"""
        notification = outcome.to_notification()
        if notification is not None:
            self.notifications.append(notification)
        self.updated_at = datetime.utcnow()
        return outcome

    def drain_notifications(self) -> list[Notification]:
        pending, self.notifications = self.notifications, []
        return pending

    def cart_locked(self) -> Optional[Outcome]:
        """Reject cart changes once settlement has started"""
        if self.settlement.is_building:
            return None
        return Outcome.rejected(
            f"Cart cannot be changed while settlement is {self.settlement.state.value}"
        )

    def new_order(self) -> Outcome:
        """Start a fresh order after the previous one settled"""
        if self.settlement.state != SettlementState.SETTLED:
            return Outcome.rejected("Current order is not settled yet")

        self.store.clear()
        self.settlement = SettlementCoordinator(self.store, self.backend)
        return self.record(Outcome.ok("Ready for a new order"))

    def cart_view(self) -> CartView:
        cart = self.cart
        totals = calculate_totals(cart)
        return CartView(
            lines=[OrderLineView.from_line(line) for line in cart.lines],
            item_count=sum(line.quantity for line in cart.lines),
            subtotal=round_money(totals.subtotal),
            promotion_discount=round_money(totals.promotion_discount),
            manual_discount=round_money(totals.manual_discount),
            discount=round_money(totals.discount),
            total=round_money(totals.total),
            applied_promotion=cart.applied_promotion,
            manual_discount_percentage=cart.manual_discount_percentage,
            customer=cart.customer,
            order_mode=cart.order_mode,
            table_ref=cart.table_ref,
            currency=self.currency,
        )

    def settlement_view(self) -> SettlementView:
        return SettlementView(
            state=self.settlement.state,
            busy=self.settlement.busy,
            available_methods=self.settlement.available_methods(),
            context=self.settlement.context,
            last_order_id=self.settlement.last_order_id,
        )


class SessionManager:
    """Registry of POS sessions and open order edits"""

    def __init__(self, backend: Any, default_order_mode: OrderMode = OrderMode.TAKEAWAY, currency: str = "INR"):
        self.backend = backend
        self.default_order_mode = default_order_mode
        self.currency = currency
        self.sessions: dict[str, PosSession] = {}
        self.edits: dict[str, OrderEditSession] = {}

    def create_session(self, order_mode: Optional[OrderMode] = None) -> PosSession:
        """Create a new POS session"""
        session = PosSession(
            self.backend,
            order_mode=order_mode or self.default_order_mode,
            currency=self.currency,
        )
        self.sessions[session.session_id] = session
        logger.debug(f"Created POS session {session.session_id}")
        return session

    def get_session(self, session_id: str) -> Optional[PosSession]:
        """Get session by ID"""
        return self.sessions.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        """Delete a session"""
        if session_id in self.sessions:
            del self.sessions[session_id]
            return True
        return False

    def open_edit(self, order_id: str, existing_items: list) -> OrderEditSession:
        """Start editing a persisted order"""
        edit = OrderEditSession(order_id, existing_items, self.backend)
        self.edits[edit.edit_id] = edit
        return edit

    def get_edit(self, edit_id: str) -> Optional[OrderEditSession]:
        return self.edits.get(edit_id)

    def close_edit(self, edit_id: str) -> bool:
        if edit_id in self.edits:
            del self.edits[edit_id]
            return True
        return False

    def cleanup_old_sessions(self, max_age_hours: int = 24) -> int:
        """Remove sessions and order edits idle for more than max_age_hours"""
        now = datetime.utcnow()
        max_age = max_age_hours * 3600
        old_sessions = [
            sid for sid, session in self.sessions.items()
            if (now - session.updated_at).total_seconds() > max_age
        ]
        for sid in old_sessions:
            del self.sessions[sid]

        # An edit with a save in flight is kept until it settles
        old_edits = [
            eid for eid, edit in self.edits.items()
            if not edit.busy and (now - edit.updated_at).total_seconds() > max_age
        ]
        for eid in old_edits:
            del self.edits[eid]

        if old_sessions or old_edits:
            logger.info(
                f"Cleaned up {len(old_sessions)} sessions and {len(old_edits)} order edits"
            )
        return len(old_sessions) + len(old_edits)
