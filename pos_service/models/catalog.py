"""Menu catalog models"""

from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional


class CatalogItem(BaseModel):
    """Item on the menu catalog"""
    id: str
    name: str
    price: Decimal = Field(ge=0)
    category: Optional[str] = None
    is_available: bool = True


class CatalogSearchResponse(BaseModel):
    """Response from catalog search"""
    items: list[CatalogItem]
    total: int
