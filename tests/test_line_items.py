from decimal import Decimal

from pos_service.models import CatalogItem, OutcomeStatus, Promotion, CustomerRef
from pos_service.services import LineItemStore, line_total


def test_adding_same_item_merges_into_one_line(store, tea):
    for _ in range(3):
        assert store.add_catalog_item(tea).success

    assert len(store.lines) == 1
    line = store.lines[0]
    assert line.quantity == 3
    assert line.source_item_id == "item-001"
    assert line_total(line) == Decimal("60")


def test_different_items_keep_insertion_order(store, tea, samosa):
    store.add_catalog_item(samosa)
    store.add_catalog_item(tea)
    store.add_catalog_item(samosa)

    assert [line.name for line in store.lines] == ["Samosa", "Tea"]
    assert [line.quantity for line in store.lines] == [2, 1]


def test_name_and_price_are_copied_at_add_time(store, tea):
    store.add_catalog_item(tea)
    tea.name = "Masala Tea"
    tea.price = Decimal("25")

    assert store.lines[0].name == "Tea"
    assert store.lines[0].unit_price == Decimal("20")


def test_unavailable_item_is_rejected(store):
    kulfi = CatalogItem(id="item-010", name="Mango Kulfi", price=Decimal("60"), is_available=False)

    outcome = store.add_catalog_item(kulfi)

    assert outcome.status == OutcomeStatus.VALIDATION_FAILED
    assert store.lines == []


def test_decrement_to_zero_removes_line(store, tea):
    store.add_catalog_item(tea)
    line_id = store.lines[0].id

    store.decrement(line_id)

    assert store.lines == []


def test_increment_and_decrement_adjust_quantity(store, tea):
    store.add_catalog_item(tea)
    line_id = store.lines[0].id

    store.increment(line_id)
    store.increment(line_id)
    store.decrement(line_id)

    assert store.lines[0].quantity == 2


def test_custom_items_are_never_merged(store):
    store.add_custom_item("Special Combo", Decimal("99"))
    store.add_custom_item("Special Combo", Decimal("99"))

    assert len(store.lines) == 2
    first, second = store.lines
    assert first.is_custom and second.is_custom
    assert first.id != second.id
    assert first.source_item_id != second.source_item_id

    store.remove(first.id)
    assert [line.id for line in store.lines] == [second.id]


def test_custom_item_does_not_merge_with_catalog_line(store, tea):
    store.add_catalog_item(tea)
    store.add_custom_item("Tea", "20")
    store.add_catalog_item(tea)

    assert len(store.lines) == 2
    assert store.lines[0].quantity == 2
    assert store.lines[1].quantity == 1


def test_custom_item_with_quantity(store):
    outcome = store.add_custom_item("  Birthday Cake  ", "450", quantity=2)

    assert outcome.success
    assert store.lines[0].name == "Birthday Cake"
    assert store.lines[0].quantity == 2


def test_custom_item_validation(store):
    assert store.add_custom_item("   ", "10").status == OutcomeStatus.VALIDATION_FAILED
    assert store.add_custom_item("Combo", "0").status == OutcomeStatus.VALIDATION_FAILED
    assert store.add_custom_item("Combo", "-5").status == OutcomeStatus.VALIDATION_FAILED
    assert store.add_custom_item("Combo", "abc").status == OutcomeStatus.VALIDATION_FAILED
    assert store.add_custom_item("Combo", "10", quantity=0).status == OutcomeStatus.VALIDATION_FAILED
    assert store.lines == []


def test_unknown_line_id_is_a_silent_no_op(store, tea):
    store.add_catalog_item(tea)

    for outcome in (
        store.increment("missing"),
        store.decrement("missing"),
        store.remove("missing"),
        store.set_note("missing", "extra hot"),
    ):
        assert outcome.success

    assert len(store.lines) == 1
    assert store.lines[0].quantity == 1


def test_note_does_not_change_totals(store, tea):
    store.add_catalog_item(tea)
    line_id = store.lines[0].id

    store.set_note(line_id, " less sugar ")
    assert store.lines[0].note == "less sugar"
    assert line_total(store.lines[0]) == Decimal("20")

    store.set_note(line_id, "")
    assert store.lines[0].note is None


def test_clear_resets_promotion_and_customer(store, tea):
    store.add_catalog_item(tea)
    store.cart.applied_promotion = Promotion(
        id="p1", name="Save 10%", code="save10", discount_percentage=Decimal("10")
    )
    store.cart.customer = CustomerRef(name="Ravi", phone="9000000000")

    store.clear()

    assert store.cart.lines == []
    assert store.cart.applied_promotion is None
    assert store.cart.customer is None


def test_set_customer_requires_name(store):
    assert store.set_customer("  ").status == OutcomeStatus.VALIDATION_FAILED
    assert store.cart.customer is None

    assert store.set_customer("Ravi", phone=" 9000000000 ", email="").success
    assert store.cart.customer.phone == "9000000000"
    assert store.cart.customer.email is None


def test_plain_store_owns_its_lines(tea):
    buffer = LineItemStore()
    buffer.add_catalog_item(tea)
    buffer.clear()

    assert buffer.lines == []


def test_manual_discount_command(store, tea):
    store.add_catalog_item(tea)

    assert store.set_manual_discount("12.5").success
    assert store.cart.manual_discount_percentage == Decimal("12.5")

    for bad in ("-1", "101", "abc", "NaN"):
        assert store.set_manual_discount(bad).status == OutcomeStatus.VALIDATION_FAILED
    assert store.cart.manual_discount_percentage == Decimal("12.5")

    assert store.set_manual_discount(0).success
    assert store.cart.manual_discount_percentage is None


def test_clear_drops_manual_discount(store, tea):
    store.add_catalog_item(tea)
    store.set_manual_discount(Decimal("10"))

    store.clear()

    assert store.cart.manual_discount_percentage is None
