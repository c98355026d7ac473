# In-memory collaborators

from .catalog import CatalogDatabase, MENU_ITEMS
from .promotions import PromotionDatabase, demo_promotions
from .reservations import ReservationDatabase
from .orders import OrderDatabase
from .backend import InMemoryBackend

__all__ = [
    "CatalogDatabase",
    "MENU_ITEMS",
    "PromotionDatabase",
    "demo_promotions",
    "ReservationDatabase",
    "OrderDatabase",
    "InMemoryBackend",
]
