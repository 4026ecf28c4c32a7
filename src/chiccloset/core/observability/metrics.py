"""Business metrics on the OpenTelemetry metrics API.

Instruments are created from the global meter at import time. Until a
MeterProvider is registered the API hands out proxy instruments, so
recording is always safe; measurements start flowing once
``setup_metrics`` installs an SDK provider.

Keep attribute values low-cardinality: categories, actions, results.
Never attach user IDs or emails to metrics; put those on spans instead.
"""

import structlog
from opentelemetry import metrics
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import (
    OTLPMetricExporter as GrpcOTLPMetricExporter,
)
from opentelemetry.exporter.otlp.proto.http.metric_exporter import (
    OTLPMetricExporter as HttpOTLPMetricExporter,
)
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    MetricReader,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import Resource

from chiccloset.core.observability.tracing import signal_url


log = structlog.get_logger()

BUSINESS_METER_NAME = "chiccloset.business"


def build_metric_readers(
    otlp_endpoint: str | None,
    otlp_protocol: str = "http/protobuf",
    console: bool = False,
    export_interval_ms: int = 10000,
) -> list[MetricReader]:
    """Build periodic readers for the configured metric destinations."""
    readers: list[MetricReader] = []

    if otlp_endpoint:
        if otlp_protocol == "grpc":
            exporter = GrpcOTLPMetricExporter(
                endpoint=otlp_endpoint,
                insecure=not otlp_endpoint.startswith("https"),
            )
        else:
            exporter = HttpOTLPMetricExporter(
                endpoint=signal_url(otlp_endpoint, "metrics")
            )
        readers.append(
            PeriodicExportingMetricReader(
                exporter, export_interval_millis=export_interval_ms
            )
        )

    if console:
        readers.append(
            PeriodicExportingMetricReader(
                ConsoleMetricExporter(), export_interval_millis=export_interval_ms
            )
        )

    return readers


def setup_metrics(
    resource: Resource,
    readers: list[MetricReader],
) -> MeterProvider | None:
    """Register the global MeterProvider.

    Args:
        resource: Service identity attached to every metric
        readers: Metric readers from ``build_metric_readers``

    Returns:
        The active SDK MeterProvider, or None when no reader is configured
        (the API stays a no-op).
    """
    current = metrics.get_meter_provider()
    if isinstance(current, MeterProvider):
        log.debug("meter_provider_reused")
        return current

    if not readers:
        log.info("metrics_disabled", reason="no exporter configured")
        return None

    provider = MeterProvider(resource=resource, metric_readers=readers)
    metrics.set_meter_provider(provider)
    log.info("metrics_configured", readers=len(readers))
    return provider


def shutdown_metrics() -> None:
    """Flush and shut down the SDK meter provider, if one is registered."""
    provider = metrics.get_meter_provider()
    if isinstance(provider, MeterProvider):
        provider.shutdown()
        log.info("metrics_shutdown_complete")


class BusinessMetrics:
    """Storefront business metrics.

    Counters:
        cart.additions, cart.removals, cart.abandonment,
        checkout.completed, auth.login.attempts, auth.login.successes,
        auth.login.failures, orders.created, payments.processed, revenue

    Histograms:
        checkout.duration (ms), order.value (USD)
    """

    def __init__(self, meter: metrics.Meter | None = None) -> None:
        meter = meter or metrics.get_meter(BUSINESS_METER_NAME, "1.0.0")

        # Cart
        self.cart_additions = meter.create_counter(
            "cart.additions",
            unit="{item}",
            description="Items added to carts",
        )
        self.cart_removals = meter.create_counter(
            "cart.removals",
            unit="{item}",
            description="Items removed from carts",
        )
        self.cart_abandonment = meter.create_counter(
            "cart.abandonment",
            unit="{cart}",
            description="Carts cleared before or after purchase",
        )
        self.revenue = meter.create_counter(
            "revenue",
            unit="USD",
            description="Value of products moving through the funnel",
        )

        # Checkout
        self.checkout_completed = meter.create_counter(
            "checkout.completed",
            unit="{checkout}",
            description="Checkout form submissions that passed validation",
        )
        self.checkout_duration = meter.create_histogram(
            "checkout.duration",
            unit="ms",
            description="Time from opening checkout to a successful submit",
        )

        # Auth
        self.login_attempts = meter.create_counter(
            "auth.login.attempts",
            unit="{attempt}",
            description="Login attempts",
        )
        self.login_successes = meter.create_counter(
            "auth.login.successes",
            unit="{attempt}",
            description="Successful logins",
        )
        self.login_failures = meter.create_counter(
            "auth.login.failures",
            unit="{attempt}",
            description="Failed logins",
        )

        # Orders and payments
        self.orders_created = meter.create_counter(
            "orders.created",
            unit="{order}",
            description="Orders confirmed",
        )
        self.order_value = meter.create_histogram(
            "order.value",
            unit="USD",
            description="Order totals",
        )
        self.payments_processed = meter.create_counter(
            "payments.processed",
            unit="{payment}",
            description="Payment attempts by result and method",
        )


# Global singleton
business_metrics = BusinessMetrics()
