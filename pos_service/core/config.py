"""POS Service Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache

from ..models.cart import OrderMode


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "POS Order Service"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Managed backend (empty URL -> in-memory collaborators)
    backend_url: Optional[str] = None
    backend_api_key: Optional[str] = None
    request_timeout: float = 30.0

    # POS defaults
    currency: str = "INR"
    default_order_mode: OrderMode = OrderMode.TAKEAWAY
    seed_demo_data: bool = True

    class Config:
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def backend_configured(self) -> bool:
        """Check if a managed backend is configured"""
        return bool(self.backend_url)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
