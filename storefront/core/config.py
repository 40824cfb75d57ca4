"""Storefront Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Lindocare Storefront"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8000

    # Remote Lindo backend
    api_base_url: str = "https://lindo-project.onrender.com"
    request_timeout: float = 30.0

    # Browser state emulation
    storage_dir: Optional[str] = None  # None keeps device storage in memory
    guest_scope: str = "guest"
    session_max_age_hours: int = 24

    # Catalog display
    default_product_image: str = "/lindo.png"
    currency: str = "RWF"
    free_shipping_threshold: int = 50000
    search_history_limit: int = 10

    # Checkout
    default_payment_method: str = "dpo"
    payment_callback_url: str = "https://lindocae-frontend.vercel.app/payment-success"
    manual_payment_instructions: str = (
        "Your order has been created. To complete payment manually, send the "
        "order total via MTN Mobile Money to the Lindocare pay code and use your "
        "order number as the reference, or contact support for assistance."
    )

    # Vendor dashboard gate
    admin_username: str = "admin"
    admin_password: str = "admin123"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
