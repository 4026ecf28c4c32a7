"""Trace propagation diagnostics route."""

import structlog
from fastapi import Request
from opentelemetry.trace import format_span_id, format_trace_id

from chiccloset.core.constants import TRACEPARENT_HEADER, TRACESTATE_HEADER
from chiccloset.core.observability import create_span
from chiccloset.modules.debug import router
from chiccloset.modules.debug.schemas import (
    NOT_RECEIVED,
    ActiveSpan,
    TraceDebugResponse,
    TraceHeaders,
)


logger = structlog.get_logger()

PROPAGATION_OK = "Distributed tracing is working!"
PROPAGATION_MISSING = (
    "traceparent header not received - check CORS and the client's propagation config"
)


@router.get(
    "/trace",
    response_model=TraceDebugResponse,
    summary="Check trace propagation",
    description=(
        "Echo the traceparent/tracestate headers the API received and the "
        "IDs of the span handling the request."
    ),
)
def debug_trace(request: Request) -> TraceDebugResponse:
    """Report what trace context reached the API."""
    with create_span("api.debug.trace") as span:
        traceparent = request.headers.get(TRACEPARENT_HEADER)
        tracestate = request.headers.get(TRACESTATE_HEADER)
        span_context = span.get_span_context()

        response = TraceDebugResponse(
            headers=TraceHeaders(
                traceparent=traceparent or NOT_RECEIVED,
                tracestate=tracestate or NOT_RECEIVED,
            ),
            active_span=ActiveSpan(
                trace_id=format_trace_id(span_context.trace_id),
                span_id=format_span_id(span_context.span_id),
                trace_flags=int(span_context.trace_flags),
            ),
            propagated=traceparent is not None,
            note=PROPAGATION_OK if traceparent else PROPAGATION_MISSING,
        )

        logger.info("debug_trace_called", **response.model_dump(by_alias=True))
        return response
