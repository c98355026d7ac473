from datetime import date, timedelta

from pos_service.database import CatalogDatabase, ReservationDatabase, demo_promotions, PromotionDatabase
from pos_service.models import DetectedReservation, GuestContext


def _guest(room_name="Room 204") -> DetectedReservation:
    return DetectedReservation(
        reservation_id="res-204",
        room_id="room-204",
        room_name=room_name,
        guest_name="Meera Iyer",
    )


def test_detect_by_room_reference_ignores_prefix_and_case():
    db = ReservationDatabase()
    db.check_in(_guest())

    assert db.detect(GuestContext(table_ref="204")).guest_name == "Meera Iyer"
    assert db.detect(GuestContext(table_ref="ROOM 204")) is not None
    assert db.detect(GuestContext(table_ref="T4")) is None


def test_detect_by_phone_digits():
    db = ReservationDatabase()
    db.check_in(_guest(), phone="98200-12345")

    assert db.detect(GuestContext(phone="9820012345")).room_id == "room-204"
    assert db.detect(GuestContext(phone="9999999999")) is None


def test_check_out_removes_guest_and_phone():
    db = ReservationDatabase()
    db.check_in(_guest(), phone="9820012345")

    assert db.check_out("room 204")
    assert db.detect(GuestContext(table_ref="204", phone="9820012345")) is None
    assert db.check_out("Room 204") is False


def test_catalog_search_matches_name_or_category():
    db = CatalogDatabase()

    assert [item.name for item in db.search_items("dosa")] == ["Masala Dosa"]
    assert {item.category for item in db.search_items("beverages")} == {"Beverages"}
    assert db.get_item("item-010").is_available is False
    assert all(item.is_available for item in db.search_items())


def test_catalog_copies_seed_items():
    first, second = CatalogDatabase(), CatalogDatabase()
    first.get_item("item-001").name = "Chai"

    assert second.get_item("item-001").name == "Tea"


def test_promotion_validity_window():
    today = date(2024, 11, 1)
    db = PromotionDatabase(promotions=demo_promotions(today))

    assert db.resolve("SAVE10", today=today) is not None
    assert db.resolve("SAVE10", today=today + timedelta(days=31)) is None
    assert db.resolve("DIWALI25", today=today) is None
    assert db.resolve("DIWALI25", today=today - timedelta(days=45)) is not None
