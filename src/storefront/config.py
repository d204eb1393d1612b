"""
Application configuration management using Pydantic Settings.
Every setting can be overridden with a ``STOREFRONT_``-prefixed environment
variable or a ``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings"""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        extra="ignore",
    )

    # Application
    app_name: str = "Storefront"
    environment: str = "development"

    # Database
    database_url: str = "sqlite+aiosqlite:///./storefront.db"
    database_echo: bool = False
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_pool_timeout: int = 30

    # Logging
    log_level: str = "WARNING"

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Localization
    locale: str = "en"

    @property
    def database_url_async(self) -> str:
        """Convert a sync database URL to its async driver form"""
        if self.database_url.startswith("sqlite://"):
            return self.database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return self.database_url

    @property
    def is_sqlite(self) -> bool:
        return self.database_url_async.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    """
    Create cached settings instance.
    Settings are read from the environment only once per process.
    """
    return Settings()
