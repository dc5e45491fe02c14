# app/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from functools import lru_cache
from typing import List, Optional


class Settings(BaseSettings):
    ENV: str = "development"
    SERVICE_NAME: str = "cart-service"
    DATA_DIR: Path = Path("data")  # where CSV / XLSX files will live
    CARTS_FILE: str = "carts.csv"  # can be carts.xlsx if you prefer Excel

    # product catalog collaborator
    PRODUCT_SERVICE_URL: Optional[str] = None
    DOCKER: bool = False
    PRODUCT_LOOKUP_TIMEOUT: float = 3.0  # seconds, per lookup
    PLACEHOLDER_IMAGE: str = "/placeholder-product.jpg"

    # identity
    JWT_SECRET: str = "dev-secret-change-me"
    JWT_ALGORITHM: str = "HS256"
    TRUST_USER_ID_HEADER: bool = True

    CORS_ORIGINS: str = "http://localhost:3000"

    # Example .env:
    # DATA_DIR=./data
    # PRODUCT_SERVICE_URL=http://product-service:3001

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def product_base_url(self) -> str:
        """Explicit PRODUCT_SERVICE_URL wins; otherwise pick the docker or local default."""
        if self.PRODUCT_SERVICE_URL:
            return self.PRODUCT_SERVICE_URL.rstrip("/")
        return "http://product-service:3001" if self.DOCKER else "http://localhost:3001"

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


settings = get_settings()
