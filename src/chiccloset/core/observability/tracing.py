"""OpenTelemetry tracing configuration.

Provides distributed tracing with automatic instrumentation for FastAPI
requests. Incoming W3C ``traceparent``/``tracestate`` headers are honoured
by the instrumentation, so spans created by the storefront client and by
this API join into a single trace.

Traces are exported to an OTLP-compatible backend (Jaeger, Tempo, etc.)
when OTLP_ENDPOINT is configured, and/or printed to the console when
CONSOLE_EXPORTER is enabled.
"""

from typing import Any

import structlog
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
    OTLPSpanExporter as GrpcOTLPSpanExporter,
)
from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
    OTLPSpanExporter as HttpOTLPSpanExporter,
)
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.trace import Span

from chiccloset.config import Settings, settings
from chiccloset.core.constants import (
    SPAN_EXPORT_TIMEOUT_MS,
    SPAN_MAX_EXPORT_BATCH_SIZE,
    SPAN_MAX_QUEUE_SIZE,
    SPAN_SCHEDULE_DELAY_MS,
    TRACEPARENT_HEADER,
    TRACESTATE_HEADER,
    UNTRACED_PATHS,
)


log = structlog.get_logger()

BACKEND_TRACER_NAME = "chiccloset-backend-tracer"


def create_resource(
    service_name: str,
    service_version: str,
    environment: str,
    namespace: str | None = None,
) -> Resource:
    """Create the Resource describing this service.

    The attributes are merged over the SDK defaults (``telemetry.sdk.*``),
    so every span and metric carries the service identity.

    Args:
        service_name: Value for ``service.name``
        service_version: Value for ``service.version``
        environment: Value for ``deployment.environment``
        namespace: Optional ``service.namespace``

    Returns:
        OpenTelemetry Resource
    """
    attributes: dict[str, str] = {
        "service.name": service_name,
        "service.version": service_version,
        "deployment.environment": environment,
    }
    if namespace:
        attributes["service.namespace"] = namespace
    return Resource.create(attributes)


def signal_url(endpoint: str, signal: str) -> str:
    """Return the OTLP/HTTP URL for a signal.

    ``http://localhost:4318`` becomes ``http://localhost:4318/v1/traces``;
    an endpoint that already names the signal path is left alone.
    """
    suffix = f"/v1/{signal}"
    if endpoint.rstrip("/").endswith(suffix):
        return endpoint
    return endpoint.rstrip("/") + suffix


def build_span_exporters(
    otlp_endpoint: str | None,
    otlp_protocol: str = "http/protobuf",
    console: bool = False,
) -> list[SpanExporter]:
    """Build the span exporters for the configured destinations.

    Args:
        otlp_endpoint: Collector endpoint, or None to skip OTLP export
        otlp_protocol: ``grpc`` or ``http/protobuf``
        console: Also print finished spans to stdout

    Returns:
        Exporters in the order they should be registered
    """
    exporters: list[SpanExporter] = []

    if otlp_endpoint:
        if otlp_protocol == "grpc":
            exporters.append(
                GrpcOTLPSpanExporter(
                    endpoint=otlp_endpoint,
                    insecure=not otlp_endpoint.startswith("https"),
                )
            )
        else:
            exporters.append(
                HttpOTLPSpanExporter(endpoint=signal_url(otlp_endpoint, "traces"))
            )

    if console:
        exporters.append(ConsoleSpanExporter())

    return exporters


def configure_tracer_provider(
    resource: Resource,
    exporters: list[SpanExporter],
) -> TracerProvider:
    """Create and register the global tracer provider.

    Each exporter gets its own BatchSpanProcessor. If an SDK provider has
    already been registered in this process it is returned unchanged, since
    OpenTelemetry only allows the global provider to be set once.

    Args:
        resource: Service identity attached to every span
        exporters: Destinations for finished spans

    Returns:
        The active SDK TracerProvider
    """
    current = trace.get_tracer_provider()
    if isinstance(current, TracerProvider):
        log.debug("tracer_provider_reused")
        return current

    provider = TracerProvider(resource=resource)
    for exporter in exporters:
        provider.add_span_processor(
            BatchSpanProcessor(
                exporter,
                max_queue_size=SPAN_MAX_QUEUE_SIZE,
                schedule_delay_millis=SPAN_SCHEDULE_DELAY_MS,
                export_timeout_millis=SPAN_EXPORT_TIMEOUT_MS,
                max_export_batch_size=SPAN_MAX_EXPORT_BATCH_SIZE,
            )
        )

    trace.set_tracer_provider(provider)
    log.info(
        "tracer_provider_registered",
        service=resource.attributes.get("service.name"),
        exporters=[type(e).__name__ for e in exporters] or ["none"],
    )
    return provider


def _server_request_hook(span: Span, scope: dict[str, Any]) -> None:
    """Decorate the HTTP server span with request metadata."""
    if not span or not span.is_recording():
        return

    headers = {
        key.decode("latin-1").lower(): value.decode("latin-1")
        for key, value in scope.get("headers", [])
    }
    span.set_attribute("custom.request_id", headers.get("x-request-id", "none"))

    traceparent = headers.get(TRACEPARENT_HEADER)
    if traceparent:
        log.debug("traceparent_received", traceparent=traceparent)


def setup_tracing(app: FastAPI, config: Settings = settings) -> TracerProvider:
    """Configure OpenTelemetry tracing for the application.

    Registers the backend tracer provider and instruments the FastAPI app.
    Health checks and API docs are not traced.

    Args:
        app: The FastAPI application instance to instrument
        config: Settings to read service identity and exporters from

    Returns:
        The active TracerProvider
    """
    resource = create_resource(
        config.service_name,
        config.service_version,
        config.environment,
        config.service_namespace,
    )
    exporters = build_span_exporters(
        config.otlp_endpoint,
        config.otlp_protocol,
        config.console_exporter,
    )
    provider = configure_tracer_provider(resource, exporters)

    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=provider,
        excluded_urls=",".join(UNTRACED_PATHS),
        server_request_hook=_server_request_hook,
        http_capture_headers_server_request=[TRACEPARENT_HEADER, TRACESTATE_HEADER],
    )
    log.debug("instrumented_fastapi")

    log.info(
        "tracing_setup_complete",
        endpoint=config.otlp_endpoint,
        protocol=config.otlp_protocol if config.otlp_endpoint else None,
        console=config.console_exporter,
    )
    return provider


def get_tracer(name: str = BACKEND_TRACER_NAME, version: str | None = None) -> trace.Tracer:
    """Get a tracer instance for manual span creation.

    Args:
        name: Name for the tracer (instrumentation scope)
        version: Optional instrumentation scope version

    Returns:
        OpenTelemetry Tracer instance

    Example:
        tracer = get_tracer()
        with tracer.start_as_current_span("inventory.check"):
            # ... do work
    """
    return trace.get_tracer(name, version)


def shutdown_tracing() -> None:
    """Shutdown tracing and flush any pending spans.

    Should be called during application shutdown.
    """
    provider = trace.get_tracer_provider()
    if isinstance(provider, TracerProvider):
        provider.force_flush()
        provider.shutdown()
        log.info("tracing_shutdown_complete")
