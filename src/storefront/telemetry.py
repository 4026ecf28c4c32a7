"""Client-side OpenTelemetry setup.

The storefront registers its own Resource and exporters, instruments
httpx so outbound requests carry ``traceparent``/``tracestate``, and
exposes the ``shophub-frontend-tracer`` used by the cart, session and
checkout flows.
"""

import httpx
import structlog
from opentelemetry import trace
from opentelemetry.instrumentation.httpx import (
    HTTPXClientInstrumentor,
    RequestInfo,
    ResponseInfo,
)
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import Span, format_trace_id

from chiccloset.core.observability import (
    create_child_span,
    create_resource,
    create_span,
    setup_metrics,
    simulate_latency,
)
from chiccloset.core.observability.metrics import build_metric_readers
from chiccloset.core.observability.tracing import (
    build_span_exporters,
    configure_tracer_provider,
)
from storefront import __version__
from storefront.config import StorefrontSettings, settings


log = structlog.get_logger()

FRONTEND_TRACER_NAME = "shophub-frontend-tracer"

tracer = trace.get_tracer(FRONTEND_TRACER_NAME, __version__)


def _request_hook(span: Span, request: RequestInfo) -> None:
    if not span or not span.is_recording():
        return
    url = httpx.URL(str(request.url))
    span.set_attribute("http.target", url.path)
    host = f"{url.host}:{url.port}" if url.port else url.host
    span.set_attribute("http.host", host)


def _response_hook(span: Span, request: RequestInfo, response: ResponseInfo) -> None:
    if not span or not span.is_recording():
        return
    span.set_attribute("http.status_code", response.status_code)
    span.set_attribute("http.status_text", httpx.codes.get_reason_phrase(response.status_code))


def setup_telemetry(config: StorefrontSettings = settings) -> TracerProvider:
    """Register the storefront's tracer and meter providers and instrument httpx.

    Args:
        config: Storefront settings to read identity and exporters from

    Returns:
        The active TracerProvider
    """
    resource = create_resource(
        config.service_name,
        config.service_version,
        config.environment,
        config.service_namespace,
    )
    provider = configure_tracer_provider(
        resource,
        build_span_exporters(
            config.otlp_endpoint,
            config.otlp_protocol,
            config.console_exporter,
        ),
    )
    setup_metrics(
        resource,
        build_metric_readers(
            config.otlp_endpoint,
            config.otlp_protocol,
            False,
            config.metrics_export_interval_ms,
        ),
    )

    instrumentor = HTTPXClientInstrumentor()
    if not instrumentor.is_instrumented_by_opentelemetry:
        instrumentor.instrument(
            tracer_provider=provider,
            request_hook=_request_hook,
            response_hook=_response_hook,
        )

    log.info(
        "storefront_telemetry_initialized",
        service=config.service_name,
        endpoint=config.otlp_endpoint,
        console=config.console_exporter,
    )
    return provider


def create_demo_trace(latency_scale: float | None = None) -> str:
    """Emit a small three-span trace to check the export pipeline.

    Returns:
        The hex trace ID of the ``demo.trace`` root span
    """
    scale = settings.latency_scale if latency_scale is None else latency_scale

    with create_span("demo.trace", {"demo": True}, tracer=tracer) as root:
        root.add_event("demo_trace_started")

        with create_child_span("demo.operation1", root, tracer=tracer) as span:
            span.set_attribute("operation", "first")
            simulate_latency(50, scale)

        with create_child_span("demo.operation2", root, tracer=tracer) as span:
            span.set_attribute("operation", "second")
            simulate_latency(100, scale)

        root.add_event("demo_trace_completed")
        trace_id = format_trace_id(root.get_span_context().trace_id)

    log.info("demo_trace_created", trace_id=trace_id)
    return trace_id
