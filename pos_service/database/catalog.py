"""Menu catalog storage"""

from decimal import Decimal
from typing import Optional

from ..models.catalog import CatalogItem

# Demo menu
MENU_ITEMS: dict[str, CatalogItem] = {
    "item-001": CatalogItem(id="item-001", name="Tea", price=Decimal("20"), category="Beverages"),
    "item-002": CatalogItem(id="item-002", name="Filter Coffee", price=Decimal("30"), category="Beverages"),
    "item-003": CatalogItem(id="item-003", name="Sweet Lassi", price=Decimal("50"), category="Beverages"),
    "item-004": CatalogItem(id="item-004", name="Samosa", price=Decimal("15"), category="Snacks"),
    "item-005": CatalogItem(id="item-005", name="Vada Pav", price=Decimal("25"), category="Snacks"),
    "item-006": CatalogItem(id="item-006", name="Masala Dosa", price=Decimal("80"), category="Mains"),
    "item-007": CatalogItem(id="item-007", name="Paneer Tikka", price=Decimal("180"), category="Mains"),
    "item-008": CatalogItem(id="item-008", name="Veg Biryani", price=Decimal("160"), category="Mains"),
    "item-009": CatalogItem(id="item-009", name="Gulab Jamun", price=Decimal("40"), category="Desserts"),
    "item-010": CatalogItem(
        id="item-010",
        name="Mango Kulfi",
        price=Decimal("60"),
        category="Desserts",
        is_available=False,
    ),
}


class CatalogDatabase:
    """In-memory menu catalog"""

    def __init__(self, items: Optional[dict[str, CatalogItem]] = None):
        source = MENU_ITEMS if items is None else items
        self.items = {item_id: item.model_copy() for item_id, item in source.items()}

    def get_item(self, item_id: str) -> Optional[CatalogItem]:
        """Get a menu item by ID"""
        return self.items.get(item_id)

    def search_items(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        available_only: bool = True,
        limit: int = 50,
    ) -> list[CatalogItem]:
        """Search menu items by name or category"""
        results = list(self.items.values())

        if query:
            query_lower = query.strip().lower()
            results = [
                item for item in results
                if query_lower in item.name.lower()
                or (item.category and query_lower in item.category.lower())
            ]

        if category:
            results = [item for item in results if item.category == category]

        if available_only:
            results = [item for item in results if item.is_available]

        return results[:limit]
