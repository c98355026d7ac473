"""Catalog and promotion lookup routes"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.errors import BackendError
from ..models.catalog import CatalogItem, CatalogSearchResponse
from .deps import get_backend

router = APIRouter(prefix="/api", tags=["Catalog"])


@router.get("/catalog", response_model=CatalogSearchResponse)
async def search_catalog(
    query: Optional[str] = Query(None, description="Search query"),
    backend: Any = Depends(get_backend),
):
    """Search menu items for the add-item picker"""
    try:
        items = await backend.search_catalog(query)
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return CatalogSearchResponse(items=items, total=len(items))


@router.get("/catalog/{item_id}", response_model=CatalogItem)
async def get_catalog_item(item_id: str, backend: Any = Depends(get_backend)):
    """Get a menu item by ID"""
    try:
        item = await backend.get_catalog_item(item_id)
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return item
