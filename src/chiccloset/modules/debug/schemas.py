"""Pydantic schemas for trace diagnostics."""

from chiccloset.core.schemas import CamelModel


NOT_RECEIVED = "NOT RECEIVED"


class TraceHeaders(CamelModel):
    """W3C trace context headers as received by the API."""

    traceparent: str = NOT_RECEIVED
    tracestate: str = NOT_RECEIVED


class ActiveSpan(CamelModel):
    """Identifiers of the span handling the request."""

    trace_id: str
    span_id: str
    trace_flags: int


class TraceDebugResponse(CamelModel):
    """Schema for the trace propagation check."""

    success: bool = True
    message: str = "Trace context received"
    headers: TraceHeaders
    active_span: ActiveSpan
    propagated: bool
    note: str
