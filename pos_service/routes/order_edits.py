"""Routes for editing persisted orders"""

from typing import Any
from fastapi import APIRouter, Depends, HTTPException

from ..core.errors import BackendError
from ..core.session import SessionManager
from ..models.cart import AddCatalogItemRequest
from ..models.order import OpenOrderEditRequest, OrderEditView
from ..services.order_edit import OrderEditSession
from .deps import get_backend, get_order_edit, get_session_manager, raise_for_outcome

router = APIRouter(prefix="/api/order-edits", tags=["Order Edits"])


@router.post("", response_model=OrderEditView)
async def open_order_edit(
    request: OpenOrderEditRequest,
    manager: SessionManager = Depends(get_session_manager),
    backend: Any = Depends(get_backend),
):
    """Start editing an order that was already sent"""
    manager.cleanup_old_sessions()
    try:
        order = await backend.get_order(request.order_id)
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    edit = manager.open_edit(order.order_id, order.lines)
    return edit.to_view()


@router.get("/{edit_id}", response_model=OrderEditView)
async def get_order_edit_view(edit: OrderEditSession = Depends(get_order_edit)):
    return edit.to_view()


@router.delete("/{edit_id}")
async def discard_order_edit(
    edit_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    """Discard pending changes"""
    if manager.close_edit(edit_id):
        return {"message": "Order edit discarded"}
    raise HTTPException(status_code=404, detail="Order edit not found")


@router.post("/{edit_id}/items", response_model=OrderEditView)
async def add_item(
    request: AddCatalogItemRequest,
    edit: OrderEditSession = Depends(get_order_edit),
    backend: Any = Depends(get_backend),
):
    """Add a menu item to the new items buffer"""
    try:
        item = await backend.get_catalog_item(request.item_id)
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")

    raise_for_outcome(edit.add_from_catalog(item))
    return edit.to_view()


@router.post("/{edit_id}/items/{line_id}/increment", response_model=OrderEditView)
async def increment_item(line_id: str, edit: OrderEditSession = Depends(get_order_edit)):
    raise_for_outcome(edit.increment(line_id))
    return edit.to_view()


@router.post("/{edit_id}/items/{line_id}/decrement", response_model=OrderEditView)
async def decrement_item(line_id: str, edit: OrderEditSession = Depends(get_order_edit)):
    raise_for_outcome(edit.decrement(line_id))
    return edit.to_view()


@router.delete("/{edit_id}/items/{line_id}", response_model=OrderEditView)
async def remove_item(line_id: str, edit: OrderEditSession = Depends(get_order_edit)):
    raise_for_outcome(edit.remove(line_id))
    return edit.to_view()


@router.post("/{edit_id}/existing/{index}/remove", response_model=OrderEditView)
async def remove_existing_item(index: int, edit: OrderEditSession = Depends(get_order_edit)):
    """Mark a previously sent item for deletion"""
    raise_for_outcome(edit.remove_existing(index))
    return edit.to_view()


@router.post("/{edit_id}/existing/{index}/restore", response_model=OrderEditView)
async def restore_existing_item(index: int, edit: OrderEditSession = Depends(get_order_edit)):
    raise_for_outcome(edit.restore_existing(index))
    return edit.to_view()


@router.post("/{edit_id}/save", response_model=OrderEditView)
async def save_order_edit(edit: OrderEditSession = Depends(get_order_edit)):
    """Send removals and additions to the order"""
    raise_for_outcome(await edit.save())
    return edit.to_view()
