"""Root API router with health endpoints and module mounting."""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from chiccloset.config import settings
from chiccloset.modules import discover_modules


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: str


# Create root API router
api_router = APIRouter()

# Health check endpoints (no /api prefix, not traced)
health_router = APIRouter(tags=["health"])


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns 200 while the process is running. Excluded from tracing.",
)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@health_router.get(
    "/info",
    summary="Application info",
    description="Returns application metadata and telemetry identity.",
)
async def info() -> dict[str, Any]:
    """Application info endpoint."""
    return {
        "app": settings.app_name,
        "environment": settings.environment,
        "service": {
            "name": settings.service_name,
            "version": settings.service_version,
            "namespace": settings.service_namespace,
        },
        "telemetry": {
            "otlpEndpoint": settings.otlp_endpoint,
            "otlpProtocol": settings.otlp_protocol,
            "consoleExporter": settings.console_exporter,
        },
    }


# Storefront API router
storefront_router = APIRouter(prefix="/api")

# Mount discovered module routers
for module_router in discover_modules():
    storefront_router.include_router(module_router)

# Include routers in main api_router
api_router.include_router(health_router)
api_router.include_router(storefront_router)
