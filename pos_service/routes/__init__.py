# POS API Routes

from .catalog import router as catalog_router
from .sessions import router as sessions_router
from .settlement import router as settlement_router
from .order_edits import router as order_edits_router

__all__ = ["catalog_router", "sessions_router", "settlement_router", "order_edits_router"]
