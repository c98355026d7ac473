"""Shared route dependencies"""

from typing import Any

from fastapi import HTTPException, Request

from ..core.session import PosSession, SessionManager
from ..models.outcome import Outcome, OutcomeStatus
from ..services.order_edit import OrderEditSession

OUTCOME_STATUS_CODES = {
    OutcomeStatus.VALIDATION_FAILED: 400,
    OutcomeStatus.NOT_APPLIED: 404,
    OutcomeStatus.REJECTED: 409,
    OutcomeStatus.FAILED: 502,
}


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_backend(request: Request) -> Any:
    return request.app.state.backend


def get_pos_session(session_id: str, request: Request) -> PosSession:
    """Resolve the POS session from the path"""
    session = get_session_manager(request).get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def get_order_edit(edit_id: str, request: Request) -> OrderEditSession:
    edit = get_session_manager(request).get_edit(edit_id)
    if not edit:
        raise HTTPException(status_code=404, detail="Order edit not found")
    return edit


def raise_for_outcome(outcome: Outcome) -> Outcome:
    """Translate a failed outcome into an HTTP error"""
    if outcome.success:
        return outcome
    raise HTTPException(
        status_code=OUTCOME_STATUS_CODES[outcome.status],
        detail=outcome.error_message or outcome.status.value,
    )
