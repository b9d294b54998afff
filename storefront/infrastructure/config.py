"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://storefront:storefront_dev_password@db:5432/storefront"

    # Global sellers
    admin_seller_emails: list[str] = ["admin-store@Geeta Stores.com"]

    # Geo visibility
    default_service_radius_km: float = 10.0

    # Listing
    default_page_limit: int = 20
    max_page_limit: int = 100
    similar_products_limit: int = 6

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
