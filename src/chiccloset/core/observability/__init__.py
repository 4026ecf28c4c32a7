"""Observability module for tracing and metrics.

Provides OpenTelemetry integration for distributed tracing, business
metrics, and span helpers shared by the API and the storefront client.
"""

from chiccloset.core.observability.metrics import (
    BusinessMetrics,
    business_metrics,
    setup_metrics,
    shutdown_metrics,
)
from chiccloset.core.observability.spans import (
    create_child_span,
    create_span,
    current_trace_ids,
    record_business_metric,
    set_user_context,
    simulate_latency,
)
from chiccloset.core.observability.tracing import (
    create_resource,
    get_tracer,
    setup_tracing,
    shutdown_tracing,
)


__all__ = [
    "BusinessMetrics",
    "business_metrics",
    "create_child_span",
    "create_resource",
    "create_span",
    "current_trace_ids",
    "get_tracer",
    "record_business_metric",
    "set_user_context",
    "setup_metrics",
    "setup_tracing",
    "shutdown_metrics",
    "shutdown_tracing",
    "simulate_latency",
]
