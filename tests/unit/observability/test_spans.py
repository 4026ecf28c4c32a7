"""Unit tests for the span helpers."""

import pytest
from opentelemetry.trace import StatusCode

from chiccloset.core.observability import (
    create_child_span,
    create_span,
    current_trace_ids,
    record_business_metric,
    set_user_context,
    simulate_latency,
)
from chiccloset.core.observability.spans import mark_error


class TestCreateSpan:
    """Tests for create_span."""

    def test_successful_span_is_ok(self, spans):
        """A body that returns normally ends the span with OK."""
        with create_span("inventory.check", {"product.id": 3}) as span:
            span.add_event("inventory_sufficient")

        finished = spans.one("inventory.check")
        assert finished.status.status_code is StatusCode.OK
        assert finished.attributes["product.id"] == 3
        assert [e.name for e in finished.events] == ["inventory_sufficient"]

    def test_exception_marks_error_and_reraises(self, spans):
        """An escaping exception is recorded, marks ERROR and propagates."""
        with pytest.raises(ValueError, match="boom"):
            with create_span("cart.addItem"):
                raise ValueError("boom")

        finished = spans.one("cart.addItem")
        assert finished.status.status_code is StatusCode.ERROR
        assert finished.status.description == "boom"
        assert "exception" in [e.name for e in finished.events]

    def test_status_chosen_by_body_is_kept(self, spans):
        """An ERROR set inside the body is not overwritten on exit."""
        with pytest.raises(RuntimeError):
            with create_span("api.orders.create") as span:
                mark_error(span, "Payment failed")
                raise RuntimeError("declined by gateway")

        finished = spans.one("api.orders.create")
        assert finished.status.description == "Payment failed"

    def test_handled_failure_without_exception_stays_error(self, spans):
        """mark_error without raising keeps the span ERROR."""
        with create_span("auth.validateCredentials") as span:
            mark_error(span, "Invalid credentials")

        finished = spans.one("auth.validateCredentials")
        assert finished.status.status_code is StatusCode.ERROR

    def test_nested_spans_share_trace(self, spans):
        """A span opened inside another becomes its child."""
        with create_span("api.products.list"):
            with create_span("database.query.products"):
                pass

        parent = spans.one("api.products.list")
        child = spans.one("database.query.products")
        assert child.parent is not None
        assert child.parent.span_id == parent.context.span_id
        assert child.context.trace_id == parent.context.trace_id

    def test_usable_as_decorator(self, spans):
        """create_span also decorates functions."""

        @create_span("demo.operation")
        def work() -> int:
            return 42

        assert work() == 42
        assert spans.names() == ["demo.operation"]

    def test_default_tracer_is_backend_tracer(self, spans):
        """Without an explicit tracer, spans come from the versioned backend tracer."""
        with create_span("inventory.check"):
            pass

        scope = spans.one("inventory.check").instrumentation_scope
        assert scope.name == "chiccloset-backend-tracer"
        assert scope.version == "1.0.0"


class TestCreateChildSpan:
    """Tests for create_child_span."""

    def test_child_of_explicit_parent(self, spans):
        """The child's parent is the given span, not the active one."""
        with create_span("demo.trace") as root:
            with create_span("unrelated"):
                with create_child_span("demo.operation1", root):
                    pass

        root_span = spans.one("demo.trace")
        child = spans.one("demo.operation1")
        assert child.parent.span_id == root_span.context.span_id


class TestSpanEnrichment:
    """Tests for helpers that enrich the active span."""

    def test_record_business_metric(self, spans):
        """The value lands on an attribute and an event."""
        with create_span("checkout.submit"):
            record_business_metric("cart_value", 169.98, "USD")

        finished = spans.one("checkout.submit")
        assert finished.attributes["business.cart_value"] == 169.98
        assert finished.attributes["business.cart_value.unit"] == "USD"
        event = finished.events[0]
        assert event.name == "metric_recorded: cart_value"
        assert event.attributes["value"] == 169.98

    def test_record_business_metric_without_unit(self, spans):
        """No unit attribute is written when the unit is empty."""
        with create_span("checkout.submit"):
            record_business_metric("items", 3)

        finished = spans.one("checkout.submit")
        assert "business.items.unit" not in finished.attributes

    def test_record_business_metric_outside_span_is_noop(self):
        """Recording with no active span does nothing."""
        record_business_metric("cart_value", 1.0)

    def test_set_user_context(self, spans):
        """user.id and user.email are set on the active span."""
        with create_span("auth.login"):
            set_user_context(7, "demo@chiccloset.com")

        finished = spans.one("auth.login")
        assert finished.attributes["user.id"] == "7"
        assert finished.attributes["user.email"] == "demo@chiccloset.com"


class TestCurrentTraceIds:
    """Tests for current_trace_ids."""

    def test_none_outside_span(self):
        assert current_trace_ids() is None

    def test_hex_ids_inside_span(self):
        with create_span("work") as span:
            ids = current_trace_ids()
            context = span.get_span_context()

        assert ids is not None
        assert ids["trace_id"] == format(context.trace_id, "032x")
        assert ids["span_id"] == format(context.span_id, "016x")


class TestSimulateLatency:
    """Tests for simulate_latency."""

    def test_sleeps_scaled_duration(self, monkeypatch):
        calls: list[float] = []
        monkeypatch.setattr(
            "chiccloset.core.observability.spans.time.sleep", calls.append
        )

        simulate_latency(100, scale=0.5)

        assert calls == [0.05]

    def test_zero_scale_does_not_sleep(self, monkeypatch):
        calls: list[float] = []
        monkeypatch.setattr(
            "chiccloset.core.observability.spans.time.sleep", calls.append
        )

        simulate_latency(3000, scale=0)

        assert calls == []
