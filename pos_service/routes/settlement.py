"""Settlement API routes"""

from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..core.session import PosSession
from ..models.cart import CartView
from ..models.outcome import Outcome
from ..models.settlement import ChooseMethodRequest, ConfirmRequest, GuestContext, SettlementView
from .deps import get_pos_session, raise_for_outcome

router = APIRouter(prefix="/api/sessions/{session_id}", tags=["Settlement"])


class BeginSettlementRequest(BaseModel):
    """Optional guest lookup context; defaults to the cart's table and customer"""
    table_ref: Optional[str] = None
    phone: Optional[str] = None


class SettlementResponse(BaseModel):
    """Settlement API response"""
    settlement: SettlementView
    cart: CartView
    message: Optional[str] = None
    order_id: Optional[str] = None


def settlement_response(session: PosSession, outcome: Outcome) -> SettlementResponse:
    raise_for_outcome(session.record(outcome))
    return SettlementResponse(
        settlement=session.settlement_view(),
        cart=session.cart_view(),
        message=outcome.message,
        order_id=outcome.order_id,
    )


@router.get("/settlement", response_model=SettlementView)
async def get_settlement(session: PosSession = Depends(get_pos_session)):
    return session.settlement_view()


@router.post("/settlement/begin", response_model=SettlementResponse)
async def begin_settlement(
    request: Optional[BeginSettlementRequest] = None,
    session: PosSession = Depends(get_pos_session),
):
    """Move to payment method selection, detecting in-house guests"""
    context = None
    if request and (request.table_ref or request.phone):
        context = GuestContext(table_ref=request.table_ref, phone=request.phone)
    outcome = await session.settlement.begin(context)
    return settlement_response(session, outcome)


@router.post("/settlement/method", response_model=SettlementResponse)
async def choose_method(
    request: ChooseMethodRequest,
    session: PosSession = Depends(get_pos_session),
):
    outcome = session.settlement.choose_method(request.method)
    return settlement_response(session, outcome)


@router.post("/settlement/back", response_model=SettlementResponse)
async def back_to_order(session: PosSession = Depends(get_pos_session)):
    return settlement_response(session, session.settlement.back())


@router.post("/settlement/cancel", response_model=SettlementResponse)
async def cancel_settlement(session: PosSession = Depends(get_pos_session)):
    return settlement_response(session, session.settlement.cancel())


@router.post("/settlement/confirm", response_model=SettlementResponse)
async def confirm_settlement(
    request: Optional[ConfirmRequest] = None,
    session: PosSession = Depends(get_pos_session),
):
    """
    Confirm payment and persist the order.

    Rejected with 409 while a previous confirm is still in flight.
    A failed order call answers 502 and leaves the session ready to retry.
    """
    send_bill = request.send_bill if request else False
    outcome = await session.settlement.confirm(send_bill=send_bill)
    return settlement_response(session, outcome)


@router.post("/new-order", response_model=SettlementResponse)
async def new_order(session: PosSession = Depends(get_pos_session)):
    """Start the next order once the current one is settled"""
    return settlement_response(session, session.new_order())
