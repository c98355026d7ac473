"""
POS Order Service

Cart, promotion and settlement engine behind the restaurant/hotel point of
sale. Talks to the managed backend when one is configured and to in-memory
collaborators otherwise.
"""

import os
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .core.config import Settings, get_settings
from .core.session import SessionManager
from .database import CatalogDatabase, InMemoryBackend, PromotionDatabase
from .models.settlement import DetectedReservation
from .routes import catalog_router, sessions_router, settlement_router, order_edits_router
from .services.backend_client import BackendClient

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_backend(settings: Settings) -> Any:
    """Pick the managed backend or the in-memory collaborators"""
    if settings.backend_configured:
        return BackendClient(
            backend_url=settings.backend_url,
            api_key=settings.backend_api_key,
            timeout=settings.request_timeout,
        )

    if not settings.seed_demo_data:
        return InMemoryBackend(
            catalog=CatalogDatabase(items={}),
            promotions=PromotionDatabase(promotions=[]),
        )

    backend = InMemoryBackend()
    backend.reservations.check_in(
        DetectedReservation(
            reservation_id="res-1001",
            room_id="room-101",
            room_name="Room 101",
            guest_name="Anita Sharma",
        ),
        phone="9876543210",
    )
    return backend


def create_app(settings: Optional[Settings] = None, backend: Optional[Any] = None) -> FastAPI:
    """Create the FastAPI application"""
    settings = settings or get_settings()
    backend = backend if backend is not None else build_backend(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events"""
        logger.info(f"{settings.app_name} starting up...")
        logger.info(
            f"Backend: {settings.backend_url if settings.backend_configured else 'in-memory'}"
        )
        yield
        logger.info(f"{settings.app_name} shutting down...")
        await app.state.backend.close()

    app = FastAPI(
        title=settings.app_name,
        description="Order cart and settlement engine for the restaurant POS",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, restrict this
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.backend = backend
    app.state.sessions = SessionManager(
        backend,
        default_order_mode=settings.default_order_mode,
        currency=settings.currency,
    )

    app.include_router(catalog_router)
    app.include_router(sessions_router)
    app.include_router(settlement_router)
    app.include_router(order_edits_router)

    @app.get("/")
    async def home():
        return {
            "message": f"{settings.app_name} API",
            "docs": "/docs",
            "endpoints": {
                "catalog": "/api/catalog",
                "sessions": "/api/sessions",
                "order_edits": "/api/order-edits",
            },
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "pos-order-service",
            "backend": "managed" if settings.backend_configured else "in-memory",
            "open_sessions": len(app.state.sessions.sessions),
        }

    return app


configure_logging(get_settings())
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "pos_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
