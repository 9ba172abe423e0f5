"""Application configuration management."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.constants import (
    DEFAULT_CURRENCY,
    ORDER_SYNC_INTERVAL_SECONDS,
    ORDER_TAG_PREFIX,
    PLACEHOLDER_EMAIL_DOMAIN,
    SOURCE_MARKER_TAG,
    STATUS_UPDATE_INTERVAL_SECONDS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = "kk-order-sync"
    app_env: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # -------------------------------------------------------------------------
    # API Settings
    # -------------------------------------------------------------------------
    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # -------------------------------------------------------------------------
    # KuantoKusta (marketplace)
    # -------------------------------------------------------------------------
    kuantokusta_api_url: str = ""
    kuantokusta_api_key: str = ""
    kuantokusta_api_timeout: float = 30.0

    # -------------------------------------------------------------------------
    # Shopify (storefront)
    # -------------------------------------------------------------------------
    shopify_api_url: str = ""
    shopify_access_token: str = ""
    shopify_api_timeout: float = 30.0
    shopify_currency: str = DEFAULT_CURRENCY

    # -------------------------------------------------------------------------
    # Moloni (invoicing)
    # -------------------------------------------------------------------------
    moloni_api_url: str = "https://api.moloni.pt/v1"
    moloni_developer_id: str = ""
    moloni_client_secret: str = ""
    moloni_user: str = ""
    moloni_password: str = ""
    moloni_company_id: str = ""
    moloni_api_timeout: float = 30.0
    moloni_default_tax_id: int = 2657253
    moloni_exemption_reason: str = "M01"
    moloni_default_vat: str = "999999990"
    moloni_default_country: str = "PT"

    # -------------------------------------------------------------------------
    # Scheduler
    # -------------------------------------------------------------------------
    scheduler_enabled: bool = True
    order_sync_interval_seconds: float = ORDER_SYNC_INTERVAL_SECONDS
    status_update_interval_seconds: float = STATUS_UPDATE_INTERVAL_SECONDS
    scheduler_window: Literal["today", "week", "month"] = "today"
    timezone: str = "Europe/Lisbon"

    # -------------------------------------------------------------------------
    # Order Mapping
    # -------------------------------------------------------------------------
    order_tag_prefix: str = ORDER_TAG_PREFIX
    source_marker_tag: str = SOURCE_MARKER_TAG
    placeholder_email_domain: str = PLACEHOLDER_EMAIL_DOMAIN


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
