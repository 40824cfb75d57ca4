"""Mock backend configuration"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Mock backend settings loaded from environment (``MOCK_`` prefix)"""

    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8001

    # Access tokens
    jwt_secret: str = "lindo-mock-backend-development-signing-key"
    jwt_algorithm: str = "HS256"
    token_ttl_minutes: int = 60 * 24
    bcrypt_rounds: int = 12

    # DPO gateway
    payment_redirect_base: str = "https://secure.3gdirectpay.com/payv2.php"

    class Config:
        env_prefix = "MOCK_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
