"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chiccloset import __version__
from chiccloset.api import get_api_router
from chiccloset.config import settings
from chiccloset.core.constants import (
    REQUEST_ID_HEADER,
    TRACEPARENT_HEADER,
    TRACESTATE_HEADER,
)
from chiccloset.core.database import InMemoryDatabase
from chiccloset.core.errors import register_exception_handlers
from chiccloset.core.logging import (
    RequestIdMiddleware,
    RequestLoggingMiddleware,
    configure_logging,
)
from chiccloset.core.observability import (
    create_resource,
    setup_metrics,
    setup_tracing,
    shutdown_metrics,
    shutdown_tracing,
)
from chiccloset.core.observability.metrics import build_metric_readers
from chiccloset.modules.orders.payments import create_payment_gateway


configure_logging(settings.log_level, json_logs=settings.log_json or settings.is_production)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
        service=settings.service_name,
        otlp_endpoint=settings.otlp_endpoint,
    )

    yield

    # Shutdown
    logger.info("application_shutdown")

    # Flush pending spans and metrics
    shutdown_tracing()
    shutdown_metrics()
    logger.info("telemetry_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.app_name,
        description="Fashion storefront API instrumented with OpenTelemetry",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Mock data layer and payment gateway
    app.state.db = InMemoryDatabase()
    app.state.payment_gateway = create_payment_gateway()

    # Add request logging middleware (innermost of the three)
    app.add_middleware(RequestLoggingMiddleware)

    # Add request ID middleware so logging sees the ID
    app.add_middleware(RequestIdMiddleware)

    # Configure CORS; trace headers must be allowed or browsers drop them
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            REQUEST_ID_HEADER,
            TRACEPARENT_HEADER,
            TRACESTATE_HEADER,
        ],
        expose_headers=[TRACEPARENT_HEADER, TRACESTATE_HEADER, REQUEST_ID_HEADER],
    )

    # Register exception handlers for RFC 7807 error responses
    register_exception_handlers(app)

    # Include API router
    app.include_router(get_api_router())

    # Setup OpenTelemetry tracing and metrics
    setup_tracing(app)
    setup_metrics(
        create_resource(
            settings.service_name,
            settings.service_version,
            settings.environment,
            settings.service_namespace,
        ),
        build_metric_readers(
            settings.otlp_endpoint,
            settings.otlp_protocol,
            settings.console_exporter,
            settings.metrics_export_interval_ms,
        ),
    )

    return app
