import asyncio
from decimal import Decimal
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from pos_service.core.config import Settings
from pos_service.core.errors import BackendError
from pos_service.database import InMemoryBackend
from pos_service.main import create_app
from pos_service.models import CatalogItem, DetectedReservation, OrderPayload, OrderReceipt
from pos_service.services import CartStore

ROOM_101 = DetectedReservation(
    reservation_id="res-1001",
    room_id="room-101",
    room_name="Room 101",
    guest_name="Anita Sharma",
)


class FlakyBackend(InMemoryBackend):
    """
    In-memory backend whose order calls can be made to fail or to wait,
    and whose promotion lookups can be held open.

    Every create_order/update_order_items call is recorded so tests can
    assert on exactly what was sent.
    """

    def __init__(self):
        super().__init__()
        self.fail_create = 0
        self.fail_update = 0
        self.create_gate: Optional[asyncio.Event] = None
        self.promotion_gate: Optional[asyncio.Event] = None
        self.promotion_requested = asyncio.Event()
        self.create_calls: list[OrderPayload] = []
        self.update_calls: list = []

    async def resolve_promotion(self, code):
        self.promotion_requested.set()
        if self.promotion_gate is not None:
            await self.promotion_gate.wait()
        return await super().resolve_promotion(code)

    async def create_order(self, payload: OrderPayload) -> OrderReceipt:
        self.create_calls.append(payload)
        if self.create_gate is not None:
            await self.create_gate.wait()
        if self.fail_create:
            self.fail_create -= 1
            raise BackendError("connection reset")
        return await super().create_order(payload)

    async def update_order_items(self, order_id, update) -> None:
        self.update_calls.append((order_id, update))
        if self.fail_update:
            self.fail_update -= 1
            raise BackendError("timeout")
        await super().update_order_items(order_id, update)


@pytest.fixture()
def backend() -> FlakyBackend:
    backend = FlakyBackend()
    backend.reservations.check_in(ROOM_101, phone="+91 98765 43210")
    return backend


@pytest.fixture()
def store() -> CartStore:
    return CartStore()


@pytest.fixture()
def tea() -> CatalogItem:
    return CatalogItem(id="item-001", name="Tea", price=Decimal("20"), category="Beverages")


@pytest.fixture()
def samosa() -> CatalogItem:
    return CatalogItem(id="item-004", name="Samosa", price=Decimal("15"), category="Snacks")


@pytest.fixture()
def app(backend):
    settings = Settings(backend_url=None, seed_demo_data=True)
    return create_app(settings=settings, backend=backend)


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def session_id(client) -> str:
    resp = client.post("/api/sessions")
    assert resp.status_code == 200
    return resp.json()["session_id"]
