import asyncio
from decimal import Decimal

import pytest

from pos_service.core.errors import BackendError
from pos_service.models import (
    GuestContext,
    NotificationKind,
    OrderMode,
    OutcomeStatus,
    PaymentMethod,
    SettlementState,
)
from pos_service.services import PromotionResolver, SettlementCoordinator
from pos_service.services.settlement import guest_context_for, order_source


@pytest.fixture()
def coordinator(store, backend) -> SettlementCoordinator:
    return SettlementCoordinator(store, backend)


async def _ready(coordinator, method=PaymentMethod.CASH):
    assert (await coordinator.begin()).success
    assert coordinator.choose_method(method).success


@pytest.mark.asyncio
async def test_cash_settlement_end_to_end(store, backend, coordinator, tea, samosa):
    store.add_catalog_item(tea)
    store.add_catalog_item(tea)
    store.add_catalog_item(samosa)
    assert (await PromotionResolver(store.cart, backend).apply("SAVE10")).success

    await _ready(coordinator)
    outcome = await coordinator.confirm()

    assert outcome.success
    assert outcome.notification == NotificationKind.SETTLEMENT_SUCCEEDED
    assert outcome.order_id == coordinator.last_order_id

    payload = backend.create_calls[0]
    assert payload.subtotal == Decimal("55")
    assert payload.discount == Decimal("5.5")
    assert payload.total == Decimal("49.5")
    assert payload.method == PaymentMethod.CASH
    assert payload.promotion_code == "SAVE10"
    assert payload.reservation is None

    assert coordinator.state == SettlementState.SETTLED
    assert coordinator.context.final_total == Decimal("49.5")
    assert store.cart.lines == []
    assert store.cart.applied_promotion is None


@pytest.mark.asyncio
async def test_settled_order_is_persisted(store, backend, coordinator, tea):
    store.add_catalog_item(tea)
    await _ready(coordinator, PaymentMethod.UPI)

    outcome = await coordinator.confirm()

    order = await backend.get_order(outcome.order_id)
    assert order is not None
    assert order.total == Decimal("20")
    assert order.payment_method == PaymentMethod.UPI
    assert [line.name for line in order.lines] == ["Tea"]


@pytest.mark.asyncio
async def test_failed_confirm_keeps_cart_and_allows_retry(store, backend, coordinator, tea):
    store.add_catalog_item(tea)
    store.set_customer("Ravi", phone="9000000000")
    await _ready(coordinator, PaymentMethod.CARD)
    backend.fail_create = 1

    failed = await coordinator.confirm()

    assert failed.status == OutcomeStatus.FAILED
    assert failed.notification == NotificationKind.SETTLEMENT_FAILED
    assert coordinator.state == SettlementState.AWAITING_CONFIRMATION
    assert coordinator.busy is False
    assert len(store.cart.lines) == 1
    assert store.cart.customer.name == "Ravi"
    assert coordinator.last_order_id is None

    retried = await coordinator.confirm()

    assert retried.success
    assert coordinator.state == SettlementState.SETTLED
    assert len(backend.create_calls) == 2
    assert store.cart.customer is None


@pytest.mark.asyncio
async def test_second_confirm_while_busy_is_rejected(store, backend, coordinator, tea):
    store.add_catalog_item(tea)
    await _ready(coordinator)
    backend.create_gate = asyncio.Event()

    first = asyncio.create_task(coordinator.confirm())
    await asyncio.sleep(0)
    assert coordinator.busy is True

    second = await coordinator.confirm()
    assert second.status == OutcomeStatus.REJECTED

    backend.create_gate.set()
    assert (await first).success
    assert len(backend.create_calls) == 1
    assert coordinator.busy is False


@pytest.mark.asyncio
async def test_result_after_cancel_is_ignored(store, backend, coordinator, tea):
    store.add_catalog_item(tea)
    await _ready(coordinator)
    backend.create_gate = asyncio.Event()

    pending = asyncio.create_task(coordinator.confirm())
    await asyncio.sleep(0)
    assert coordinator.cancel().success

    backend.create_gate.set()
    outcome = await pending

    assert outcome.status == OutcomeStatus.REJECTED
    assert coordinator.state == SettlementState.BUILDING
    assert coordinator.last_order_id is None
    assert len(store.cart.lines) == 1


@pytest.mark.asyncio
async def test_room_charge_requires_detected_guest(store, coordinator, tea):
    store.add_catalog_item(tea)

    await coordinator.begin()

    assert PaymentMethod.ROOM_CHARGE not in coordinator.available_methods()
    outcome = coordinator.choose_method(PaymentMethod.ROOM_CHARGE)
    assert outcome.status == OutcomeStatus.VALIDATION_FAILED
    assert coordinator.state == SettlementState.CHOOSING_METHOD


@pytest.mark.asyncio
@pytest.mark.parametrize("table_ref", ["101", "Room 101", "room101"])
async def test_room_charge_detected_from_room_reference(store, backend, coordinator, tea, table_ref):
    store.add_catalog_item(tea)
    store.set_context(order_mode=OrderMode.ROOM_SERVICE, table_ref=table_ref)

    await _ready(coordinator, PaymentMethod.ROOM_CHARGE)
    outcome = await coordinator.confirm()

    assert outcome.success
    payload = backend.create_calls[0]
    assert payload.reservation.room_name == "Room 101"
    assert payload.reservation.guest_name == "Anita Sharma"


@pytest.mark.asyncio
async def test_room_charge_detected_from_customer_phone(store, coordinator, tea):
    store.add_catalog_item(tea)
    store.set_customer("Anita", phone="+91 98765 43210")

    await coordinator.begin()

    assert coordinator.detected_reservation is not None
    assert PaymentMethod.ROOM_CHARGE in coordinator.available_methods()


def test_short_phone_is_not_used_for_guest_lookup(store):
    store.set_customer("Ravi", phone="12345")

    context = guest_context_for(store)

    assert context.phone is None
    assert context.is_empty


@pytest.mark.asyncio
async def test_guest_lookup_failure_only_hides_room_charge(store, backend, coordinator, tea):
    async def broken(context):
        raise BackendError("timeout")

    backend.detect_active_guest = broken
    store.add_catalog_item(tea)

    outcome = await coordinator.begin(GuestContext(table_ref="101"))

    assert outcome.success
    assert coordinator.state == SettlementState.CHOOSING_METHOD
    assert coordinator.available_methods() == [
        PaymentMethod.CASH,
        PaymentMethod.CARD,
        PaymentMethod.UPI,
    ]


@pytest.mark.asyncio
async def test_back_and_cancel_have_no_side_effects(store, backend, coordinator, tea):
    store.add_catalog_item(tea)

    await coordinator.begin()
    assert coordinator.back().success
    assert coordinator.state == SettlementState.BUILDING

    await _ready(coordinator)
    assert coordinator.back().status == OutcomeStatus.REJECTED
    assert coordinator.cancel().success
    assert coordinator.state == SettlementState.BUILDING
    assert coordinator.context.method is None

    assert backend.create_calls == []
    assert len(store.cart.lines) == 1


@pytest.mark.asyncio
async def test_transitions_out_of_order_are_rejected(store, coordinator, tea):
    store.add_catalog_item(tea)

    assert coordinator.choose_method(PaymentMethod.CASH).status == OutcomeStatus.REJECTED
    assert (await coordinator.confirm()).status == OutcomeStatus.REJECTED

    await coordinator.begin()
    assert (await coordinator.begin()).status == OutcomeStatus.REJECTED


@pytest.mark.asyncio
async def test_empty_cart_cannot_be_settled(backend, coordinator):
    await _ready(coordinator)

    outcome = await coordinator.confirm()

    assert outcome.status == OutcomeStatus.VALIDATION_FAILED
    assert backend.create_calls == []


@pytest.mark.asyncio
async def test_send_bill_needs_contact_details(store, backend, coordinator, tea):
    store.add_catalog_item(tea)
    await _ready(coordinator)

    assert (await coordinator.confirm(send_bill=True)).status == OutcomeStatus.VALIDATION_FAILED

    store.set_customer("Ravi", email="ravi@example.com")
    outcome = await coordinator.confirm(send_bill=True)

    assert outcome.success
    assert backend.create_calls[0].customer.email == "ravi@example.com"


@pytest.mark.asyncio
async def test_settled_coordinator_rejects_cancel(store, coordinator, tea):
    store.add_catalog_item(tea)
    await _ready(coordinator)
    await coordinator.confirm()

    assert coordinator.cancel().status == OutcomeStatus.REJECTED
    assert coordinator.state == SettlementState.SETTLED


def test_order_source_labels(store):
    assert order_source(store) == "Takeaway"

    store.set_context(order_mode=OrderMode.DINE_IN, table_ref="T4")
    assert order_source(store) == "Table T4"

    store.set_context(order_mode=OrderMode.ROOM_SERVICE, table_ref="204")
    assert order_source(store) == "Room 204"

    store.set_context(order_mode=OrderMode.ROOM_SERVICE, table_ref="")
    assert order_source(store) == "Room Service"


@pytest.mark.asyncio
async def test_payload_carries_manual_discount(store, backend, coordinator, tea, samosa):
    store.add_catalog_item(tea)
    store.add_catalog_item(samosa)
    store.set_manual_discount("20")

    await _ready(coordinator)
    assert (await coordinator.confirm()).success

    payload = backend.create_calls[0]
    assert payload.manual_discount_percentage == Decimal("20")
    assert payload.discount == Decimal("7")
    assert payload.total == Decimal("28")
    assert store.cart.manual_discount_percentage is None
