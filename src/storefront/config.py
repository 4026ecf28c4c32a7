"""Storefront configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorefrontSettings(BaseSettings):
    """Storefront settings loaded from ``STOREFRONT_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API
    api_base_url: str = "http://localhost:3001"
    request_timeout: float = 10.0

    # Service identity
    service_name: str = "shophub-ecommerce-frontend"
    service_version: str = "1.0.0"
    service_namespace: str = "ecommerce"
    environment: str = "development"

    # Observability
    otlp_endpoint: str | None = None
    otlp_protocol: Literal["grpc", "http/protobuf"] = "http/protobuf"
    console_exporter: bool = True
    metrics_export_interval_ms: int = 10000

    # Demo scenarios (slow-checkout, slow-page, error, experiment)
    demo_scenario: str | None = None
    latency_scale: float = Field(1.0, ge=0.0)


@lru_cache
def get_storefront_settings() -> StorefrontSettings:
    """Get cached storefront settings instance."""
    return StorefrontSettings()


settings = get_storefront_settings()
