"""Unit tests for storefront telemetry."""

import httpx
from opentelemetry.instrumentation.httpx import RequestInfo, ResponseInfo

from chiccloset.core.observability import create_span
from storefront.telemetry import _request_hook, _response_hook, create_demo_trace, tracer


def test_demo_trace(spans):
    trace_id = create_demo_trace(latency_scale=0)

    root = spans.one("demo.trace")
    first = spans.one("demo.operation1")
    second = spans.one("demo.operation2")
    assert format(root.context.trace_id, "032x") == trace_id
    assert root.attributes["demo"] is True
    assert [e.name for e in root.events] == ["demo_trace_started", "demo_trace_completed"]
    assert first.parent.span_id == root.context.span_id
    assert second.parent.span_id == root.context.span_id
    assert first.attributes["operation"] == "first"
    assert second.attributes["operation"] == "second"


def test_frontend_tracer_scope(spans):
    with create_span("cart.addItem", tracer=tracer):
        pass

    scope = spans.one("cart.addItem").instrumentation_scope
    assert scope.name == "shophub-frontend-tracer"
    assert scope.version == "1.0.0"


def test_httpx_hooks(spans):
    request = RequestInfo(
        method=b"GET",
        url=httpx.URL("http://localhost:3001/api/products"),
        headers=httpx.Headers(),
        stream=None,
        extensions={},
    )
    response = ResponseInfo(status_code=404, headers=httpx.Headers(), stream=None, extensions={})

    with create_span("HTTP GET") as span:
        _request_hook(span, request)
        _response_hook(span, request, response)

    finished = spans.one("HTTP GET")
    assert finished.attributes["http.target"] == "/api/products"
    assert finished.attributes["http.host"] == "localhost:3001"
    assert finished.attributes["http.status_code"] == 404
    assert finished.attributes["http.status_text"] == "Not Found"
