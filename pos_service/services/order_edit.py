"""
Order Mutation Reconciler

Edits an order that has already been persisted. New items are buffered and
existing items are only marked for removal; save() sends one delete set and
one insert set so changes made by other staff are not overwritten.
"""

import uuid
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from ..core.errors import BackendError
from ..models.cart import OrderLine, OrderLineView, round_money
from ..models.catalog import CatalogItem
from ..models.order import ExistingLineView, OrderItemsUpdate, OrderEditView
from ..models.outcome import NotificationKind, Outcome
from .line_items import LineItemStore
from .pricing import calculate_subtotal

logger = logging.getLogger(__name__)


class OrderEditSession:
    """Pending edit of one persisted order"""

    def __init__(self, order_id: str, existing_items: list[OrderLine], backend: Any):
        self.edit_id = str(uuid.uuid4())
        self.order_id = order_id
        self.backend = backend
        self._existing = [line.model_copy() for line in existing_items]
        self._marked: set[int] = set()
        self.buffer = LineItemStore()
        self.busy = False
        self.updated_at = datetime.utcnow()

    @property
    def existing_items(self) -> tuple[OrderLine, ...]:
        return tuple(self._existing)

    @property
    def new_items(self) -> list[OrderLine]:
        return self.buffer.lines

    @property
    def marked_indexes(self) -> frozenset[int]:
        return frozenset(self._marked)

    @property
    def has_changes(self) -> bool:
        return bool(self.buffer.lines or self._marked)

    @property
    def projected_total(self) -> Decimal:
        """Total of the order once this edit is saved"""
        kept = [line for idx, line in enumerate(self._existing) if idx not in self._marked]
        return calculate_subtotal(kept) + calculate_subtotal(self.buffer.lines)

    def _begin_command(self) -> Optional[Outcome]:
        """Reject commands while saving; otherwise mark the edit as active"""
        if self.busy:
            return Outcome.rejected("Order edit is being saved")
        self.updated_at = datetime.utcnow()
        return None

    # ==================== Buffer commands ====================

    def add_from_catalog(self, item: CatalogItem) -> Outcome:
        rejected = self._begin_command()
        if rejected:
            return rejected
        return self.buffer.add_catalog_item(item)

    def increment(self, line_id: str) -> Outcome:
        rejected = self._begin_command()
        if rejected:
            return rejected
        return self.buffer.increment(line_id)

    def decrement(self, line_id: str) -> Outcome:
        rejected = self._begin_command()
        if rejected:
            return rejected
        return self.buffer.decrement(line_id)

    def remove(self, line_id: str) -> Outcome:
        rejected = self._begin_command()
        if rejected:
            return rejected
        return self.buffer.remove(line_id)

    # ==================== Existing items ====================

    def remove_existing(self, index: int) -> Outcome:
        """Mark an already persisted line for deletion"""
        rejected = self._begin_command()
        if rejected:
            return rejected
        if 0 <= index < len(self._existing):
            self._marked.add(index)
        return Outcome.ok()

    def restore_existing(self, index: int) -> Outcome:
        rejected = self._begin_command()
        if rejected:
            return rejected
        self._marked.discard(index)
        return Outcome.ok()

    def build_update(self) -> OrderItemsUpdate:
        return OrderItemsUpdate(
            to_delete=[self._existing[idx].id for idx in sorted(self._marked)],
            to_insert=[line.model_copy() for line in self.buffer.lines],
        )

    async def save(self) -> Outcome:
        """Send deletions and insertions to the order collaborator"""
        if self.busy:
            return Outcome.rejected("Order edit is already being saved")
        self.updated_at = datetime.utcnow()

        if not self.has_changes:
            return Outcome.validation_failed("No changes to save")

        update = self.build_update()
        self.busy = True
        try:
            await self.backend.update_order_items(self.order_id, update)
        except BackendError as e:
            logger.error(f"Saving edit of order {self.order_id} failed: {e}")
            return Outcome.failed(f"Order could not be updated: {e}")
        finally:
            self.busy = False

        kept = [line for idx, line in enumerate(self._existing) if idx not in self._marked]
        self._existing = kept + update.to_insert
        self._marked.clear()
        self.buffer.clear()

        logger.info(
            f"Order {self.order_id} updated: "
            f"{len(update.to_delete)} removed, {len(update.to_insert)} added"
        )
        return Outcome.ok(
            f"Order {self.order_id} updated",
            notification=NotificationKind.EDIT_SAVED,
            order_id=self.order_id,
        )

    def to_view(self) -> OrderEditView:
        return OrderEditView(
            edit_id=self.edit_id,
            order_id=self.order_id,
            existing_items=[
                ExistingLineView(
                    **OrderLineView.from_line(line).model_dump(),
                    index=idx,
                    marked_for_removal=idx in self._marked,
                )
                for idx, line in enumerate(self._existing)
            ],
            new_items=[OrderLineView.from_line(line) for line in self.buffer.lines],
            projected_total=round_money(self.projected_total),
            busy=self.busy,
            has_changes=self.has_changes,
        )
