"""Configuration management using Pydantic Settings"""

from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Catalog API
    environment: Literal["production", "development"] = "development"
    api_url: str | None = None
    production_api_fallback: str = "https://backend-theta-dusky-43.vercel.app"
    development_proxy_url: str = "http://localhost:3000/api"

    # Service
    service_name: str = "circulation-desk"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0

    # Polling and UI feedback
    notification_poll_seconds: float = 300.0  # 5 minutes
    success_message_seconds: float = 5.0
    checkout_success_message_seconds: float = 3.0

    # Loan defaults
    loans_page_size: int = 10
    documents_page_size: int = 10
    default_checkout_days: int = 14
    default_extend_days: int = 7


def get_api_url(config: Settings | None = None) -> str:
    """
    Resolve the catalog API base URL.

    Production uses the configured URL or the deployed backend fallback.
    Development uses the configured URL or the same-origin proxy.
    """
    config = config or settings
    if config.environment == "production":
        return config.api_url or config.production_api_fallback
    return config.api_url or config.development_proxy_url


settings = Settings()
