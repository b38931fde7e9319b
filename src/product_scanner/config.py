"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from product_scanner.domain.products import DOMAIN_PROFILES, ProductDomain

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    food_database_url: str = DOMAIN_PROFILES[ProductDomain.FOOD].base_url
    pet_database_url: str = DOMAIN_PROFILES[ProductDomain.PET].base_url
    beauty_database_url: str = DOMAIN_PROFILES[ProductDomain.COSMETIC].base_url
    user_agent: str = "ProductScanner/0.1 (+https://github.com/product-scanner)"
    http_timeout_seconds: float = 10.0
    product_cache_ttl_seconds: int | None = None
    camera_probe_limit: int = 4
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def database_urls(self) -> dict[ProductDomain, str]:
        """Return the product database base URL for each domain."""
        return {
            ProductDomain.FOOD: self.food_database_url.rstrip("/"),
            ProductDomain.PET: self.pet_database_url.rstrip("/"),
            ProductDomain.COSMETIC: self.beauty_database_url.rstrip("/"),
        }
