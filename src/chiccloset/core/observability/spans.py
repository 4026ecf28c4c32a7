"""Helpers for manual span creation.

Span names follow the ``{entity}.{operation}`` convention used throughout
the storefront: ``cart.addItem``, ``inventory.check``, ``api.orders.create``.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import context, trace
from opentelemetry.trace import Span, Status, StatusCode, format_span_id, format_trace_id
from opentelemetry.util.types import AttributeValue

from chiccloset.config import settings
from chiccloset.core.observability.tracing import BACKEND_TRACER_NAME, get_tracer


@contextmanager
def create_span(
    name: str,
    attributes: dict[str, AttributeValue] | None = None,
    tracer: trace.Tracer | None = None,
) -> Iterator[Span]:
    """Start an active span and settle its status on exit.

    The body may set an ERROR status itself (for handled failures such as
    bad credentials); otherwise the span ends OK. An exception escaping the
    body is recorded and re-raised; it marks the span ERROR with the
    exception message unless the body already chose a status.

    Usage::

        with create_span("inventory.check", {"product.id": 3}) as span:
            span.add_event("inventory_sufficient")

        @create_span("demo.operation")
        def work() -> None: ...
    """
    tracer = tracer or get_tracer(BACKEND_TRACER_NAME, settings.service_version)
    with tracer.start_as_current_span(
        name,
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as exc:
            if _status_unset(span):
                span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            raise
        if _status_unset(span):
            span.set_status(Status(StatusCode.OK))


@contextmanager
def create_child_span(
    name: str,
    parent_span: Span,
    attributes: dict[str, AttributeValue] | None = None,
    tracer: trace.Tracer | None = None,
) -> Iterator[Span]:
    """Start a span as a child of ``parent_span`` rather than the active span."""
    ctx = trace.set_span_in_context(parent_span)
    token = context.attach(ctx)
    try:
        with create_span(name, attributes, tracer) as span:
            yield span
    finally:
        context.detach(token)


def _status_unset(span: Span) -> bool:
    status = getattr(span, "status", None)
    return status is not None and status.status_code is StatusCode.UNSET


def mark_error(span: Span, message: str) -> None:
    """Set an ERROR status on ``span`` without raising."""
    span.set_status(Status(StatusCode.ERROR, message))


def set_user_context(user_id: Any, user_email: str) -> None:
    """Attach the user identity to the active span."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attribute("user.id", str(user_id))
        span.set_attribute("user.email", user_email)


def record_business_metric(name: str, value: AttributeValue, unit: str = "") -> None:
    """Record a business value on the active span.

    Sets ``business.<name>`` (and ``business.<name>.unit``) and adds a
    ``metric_recorded: <name>`` event, so the value is searchable in the
    trace backend next to the request that produced it.
    """
    span = trace.get_current_span()
    if not span.is_recording():
        return
    span.set_attribute(f"business.{name}", value)
    event_attributes: dict[str, AttributeValue] = {"value": value}
    if unit:
        span.set_attribute(f"business.{name}.unit", unit)
        event_attributes["unit"] = unit
    span.add_event(f"metric_recorded: {name}", event_attributes)


def current_trace_ids() -> dict[str, str] | None:
    """Return the hex trace and span IDs of the active span.

    Returns:
        ``{"trace_id": ..., "span_id": ...}`` or None when no valid span
        is active.
    """
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return None
    return {
        "trace_id": format_trace_id(ctx.trace_id),
        "span_id": format_span_id(ctx.span_id),
    }


def simulate_latency(duration_ms: float, scale: float | None = None) -> None:
    """Block for ``duration_ms`` milliseconds, scaled by ``latency_scale``.

    Stands in for database and payment gateway round-trips so the spans
    have realistic widths in the trace view.
    """
    factor = settings.latency_scale if scale is None else scale
    seconds = duration_ms * factor / 1000
    if seconds > 0:
        time.sleep(seconds)
