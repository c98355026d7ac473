"""POS session and cart API routes"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..core.errors import BackendError
from ..core.session import PosSession, SessionManager
from ..models.cart import (
    AddCatalogItemRequest,
    AddCustomItemRequest,
    CartResponse,
    CartView,
    OrderMode,
    SetContextRequest,
    SetCustomerRequest,
    SetManualDiscountRequest,
    UpdateNoteRequest,
)
from ..models.outcome import Notification
from ..models.promotion import ApplyPromotionRequest, Promotion
from ..models.settlement import SettlementView
from .deps import get_backend, get_pos_session, get_session_manager, raise_for_outcome

router = APIRouter(prefix="/api/sessions", tags=["Cart"])


class CreateSessionRequest(BaseModel):
    """Request to open a POS session"""
    order_mode: Optional[OrderMode] = None


class SessionResponse(BaseModel):
    """POS session with cart and settlement state"""
    session_id: str
    cart: CartView
    settlement: SettlementView


def session_response(session: PosSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        cart=session.cart_view(),
        settlement=session.settlement_view(),
    )


def cart_response(session: PosSession, outcome) -> CartResponse:
    """Record the outcome and return the updated cart"""
    raise_for_outcome(session.record(outcome))
    return CartResponse(cart=session.cart_view(), message=outcome.message)


def ensure_unlocked(session: PosSession) -> None:
    locked = session.cart_locked()
    if locked:
        raise_for_outcome(locked)


@router.post("", response_model=SessionResponse)
async def create_session(
    request: Optional[CreateSessionRequest] = None,
    manager: SessionManager = Depends(get_session_manager),
):
    """Open a POS session with an empty cart"""
    manager.cleanup_old_sessions()
    session = manager.create_session(request.order_mode if request else None)
    return session_response(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session: PosSession = Depends(get_pos_session)):
    """Get session details"""
    return session_response(session)


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    """Close a session"""
    if manager.delete_session(session_id):
        return {"message": "Session deleted"}
    raise HTTPException(status_code=404, detail="Session not found")


@router.get("/{session_id}/notifications", response_model=list[Notification])
async def drain_notifications(session: PosSession = Depends(get_pos_session)):
    """Notifications raised since the last call"""
    return session.drain_notifications()


# ==================== Cart ====================

@router.get("/{session_id}/cart", response_model=CartResponse)
async def get_cart(session: PosSession = Depends(get_pos_session)):
    return CartResponse(cart=session.cart_view())


@router.post("/{session_id}/cart/items", response_model=CartResponse)
async def add_catalog_item(
    request: AddCatalogItemRequest,
    session: PosSession = Depends(get_pos_session),
    backend: Any = Depends(get_backend),
):
    """Add a menu item, merging with an existing line"""
    ensure_unlocked(session)

    try:
        item = await backend.get_catalog_item(request.item_id)
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")

    # Lookup awaited: settlement may have started meanwhile
    ensure_unlocked(session)
    return cart_response(session, session.store.add_catalog_item(item))


@router.post("/{session_id}/cart/custom-items", response_model=CartResponse)
async def add_custom_item(
    request: AddCustomItemRequest,
    session: PosSession = Depends(get_pos_session),
):
    """Add an ad-hoc item"""
    ensure_unlocked(session)
    outcome = session.store.add_custom_item(request.name, request.price, request.quantity)
    return cart_response(session, outcome)


@router.post("/{session_id}/cart/items/{line_id}/increment", response_model=CartResponse)
async def increment_line(line_id: str, session: PosSession = Depends(get_pos_session)):
    ensure_unlocked(session)
    return cart_response(session, session.store.increment(line_id))


@router.post("/{session_id}/cart/items/{line_id}/decrement", response_model=CartResponse)
async def decrement_line(line_id: str, session: PosSession = Depends(get_pos_session)):
    ensure_unlocked(session)
    return cart_response(session, session.store.decrement(line_id))


@router.delete("/{session_id}/cart/items/{line_id}", response_model=CartResponse)
async def remove_line(line_id: str, session: PosSession = Depends(get_pos_session)):
    ensure_unlocked(session)
    return cart_response(session, session.store.remove(line_id))


@router.put("/{session_id}/cart/items/{line_id}/note", response_model=CartResponse)
async def set_line_note(
    line_id: str,
    request: UpdateNoteRequest,
    session: PosSession = Depends(get_pos_session),
):
    ensure_unlocked(session)
    return cart_response(session, session.store.set_note(line_id, request.note))


@router.put("/{session_id}/cart/customer", response_model=CartResponse)
async def set_customer(
    request: SetCustomerRequest,
    session: PosSession = Depends(get_pos_session),
):
    """Attach customer details"""
    ensure_unlocked(session)
    outcome = session.store.set_customer(request.name, request.phone, request.email)
    return cart_response(session, outcome)


@router.put("/{session_id}/cart/context", response_model=CartResponse)
async def set_context(
    request: SetContextRequest,
    session: PosSession = Depends(get_pos_session),
):
    """Change order mode or table/room reference"""
    ensure_unlocked(session)
    outcome = session.store.set_context(request.order_mode, request.table_ref)
    return cart_response(session, outcome)


@router.put("/{session_id}/cart/discount", response_model=CartResponse)
async def set_manual_discount(
    request: SetManualDiscountRequest,
    session: PosSession = Depends(get_pos_session),
):
    """Set the cashier discount percentage on top of any promotion"""
    ensure_unlocked(session)
    return cart_response(session, session.store.set_manual_discount(request.percentage))


@router.delete("/{session_id}/cart/discount", response_model=CartResponse)
async def clear_manual_discount(session: PosSession = Depends(get_pos_session)):
    ensure_unlocked(session)
    return cart_response(session, session.store.set_manual_discount(None))


@router.delete("/{session_id}/cart", response_model=CartResponse)
async def clear_cart(session: PosSession = Depends(get_pos_session)):
    """Reset the cart to an empty order"""
    ensure_unlocked(session)
    session.store.clear()
    return CartResponse(cart=session.cart_view(), message="Order cleared")


# ==================== Promotions ====================

@router.get("/{session_id}/promotions", response_model=list[Promotion])
async def list_promotions(session: PosSession = Depends(get_pos_session)):
    """Promotions offered in the code picker"""
    return await session.promotions.list_active()


@router.post("/{session_id}/cart/promotion", response_model=CartResponse)
async def apply_promotion(
    request: ApplyPromotionRequest,
    session: PosSession = Depends(get_pos_session),
):
    """Apply a promotion code, replacing any current one"""
    ensure_unlocked(session)
    outcome = await session.promotions.apply(request.code)
    return cart_response(session, outcome)


@router.delete("/{session_id}/cart/promotion", response_model=CartResponse)
async def remove_promotion(session: PosSession = Depends(get_pos_session)):
    ensure_unlocked(session)
    return cart_response(session, session.promotions.remove())
