"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "ChicCloset Fashion Backend"
    debug: bool = False
    environment: str = "development"  # development, staging, production
    host: str = "0.0.0.0"
    port: int = 3001

    # CORS (the storefront dev server)
    cors_origins: list[str] = ["http://localhost:5173"]

    # Service identity (OpenTelemetry resource)
    service_name: str = "chiccloset-fashion-backend"
    service_version: str = "1.0.0"
    service_namespace: str = "fashion-ecommerce"

    # Observability
    otlp_endpoint: str | None = None
    otlp_protocol: Literal["grpc", "http/protobuf"] = "http/protobuf"
    console_exporter: bool = False
    metrics_export_interval_ms: int = 10000
    log_level: str = "INFO"
    log_json: bool = False

    # Simulation
    latency_scale: float = Field(1.0, ge=0.0)
    payment_success_rate: float = Field(0.95, ge=0.0, le=1.0)
    payment_gateway: str = "stripe"
    db_system: str = "postgresql"
    db_name: str = "chiccloset_db"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the log level so DEBUG/debug both work."""
        return v.upper()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
