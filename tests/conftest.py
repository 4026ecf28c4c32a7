"""Pytest configuration and shared fixtures.

Telemetry is captured in memory: one SDK TracerProvider and one
MeterProvider are registered for the whole session (OpenTelemetry only
allows the global providers to be set once), and each test starts with
an empty span exporter.
"""

import os


# Must be set before chiccloset/storefront settings are instantiated
os.environ["LATENCY_SCALE"] = "0"
os.environ["STOREFRONT_LATENCY_SCALE"] = "0"
os.environ["STOREFRONT_CONSOLE_EXPORTER"] = "false"
os.environ.pop("OTLP_ENDPOINT", None)
os.environ.pop("STOREFRONT_OTLP_ENDPOINT", None)

from collections.abc import AsyncGenerator, Generator  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from opentelemetry import metrics, trace  # noqa: E402
from opentelemetry.sdk.metrics import MeterProvider  # noqa: E402
from opentelemetry.sdk.metrics.export import InMemoryMetricReader  # noqa: E402
from opentelemetry.sdk.trace import ReadableSpan, TracerProvider  # noqa: E402
from opentelemetry.sdk.trace.export import SimpleSpanProcessor  # noqa: E402
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (  # noqa: E402
    InMemorySpanExporter,
)
from opentelemetry.trace import SpanKind  # noqa: E402

from chiccloset.core.database import InMemoryDatabase  # noqa: E402
from chiccloset.core.observability import create_resource  # noqa: E402
from chiccloset.main import create_app  # noqa: E402
from chiccloset.modules.orders.payments import PaymentGateway  # noqa: E402
from storefront.client import StorefrontClient  # noqa: E402


_span_exporter = InMemorySpanExporter()
_metric_reader = InMemoryMetricReader()

_tracer_provider = TracerProvider(
    resource=create_resource("chiccloset-test", "0.0.0", "test")
)
_tracer_provider.add_span_processor(SimpleSpanProcessor(_span_exporter))
trace.set_tracer_provider(_tracer_provider)
metrics.set_meter_provider(MeterProvider(metric_readers=[_metric_reader]))


class SpanRecorder:
    """Query helper over the finished spans of the current test."""

    def __init__(self, exporter: InMemorySpanExporter) -> None:
        self.exporter = exporter

    def all(self) -> tuple[ReadableSpan, ...]:
        return self.exporter.get_finished_spans()

    def names(self) -> list[str]:
        return [span.name for span in self.all()]

    def named(self, name: str, kind: SpanKind | None = None) -> list[ReadableSpan]:
        return [
            span
            for span in self.all()
            if span.name == name and (kind is None or span.kind is kind)
        ]

    def one(self, name: str, kind: SpanKind | None = None) -> ReadableSpan:
        matches = self.named(name, kind)
        assert len(matches) == 1, f"expected one {name!r} span, got {self.names()}"
        return matches[0]


class MetricRecorder:
    """Reads cumulative metric values from the in-memory reader."""

    def __init__(self, reader: InMemoryMetricReader) -> None:
        self.reader = reader

    def _points(self, name: str) -> list[Any]:
        data = self.reader.get_metrics_data()
        if data is None:
            return []
        return [
            point
            for resource_metrics in data.resource_metrics
            for scope_metrics in resource_metrics.scope_metrics
            for metric in scope_metrics.metrics
            if metric.name == name
            for point in metric.data.data_points
        ]

    def total(self, name: str, **attributes: str) -> float:
        """Sum a counter's points whose attributes include ``attributes``.

        Keys use ``_`` for ``.``: ``total("cart.additions", action="new_item")``.
        """
        wanted = {key.replace("_", "."): value for key, value in attributes.items()}
        return sum(
            point.value
            for point in self._points(name)
            if all(point.attributes.get(k) == v for k, v in wanted.items())
        )

    def count(self, name: str) -> int:
        """Number of recordings of a histogram."""
        return sum(point.count for point in self._points(name))


@pytest.fixture
def spans() -> Generator[SpanRecorder, None, None]:
    """Finished spans of this test."""
    _span_exporter.clear()
    yield SpanRecorder(_span_exporter)
    _span_exporter.clear()


@pytest.fixture
def metric_values() -> MetricRecorder:
    """Cumulative metric values (compare before/after within a test)."""
    return MetricRecorder(_metric_reader)


@pytest.fixture
def db() -> InMemoryDatabase:
    """Fresh seeded database."""
    return InMemoryDatabase()


@pytest.fixture
def gateway() -> PaymentGateway:
    """Payment gateway that approves every charge."""
    return PaymentGateway(success_rate=1.0)


@pytest.fixture
def app(db: InMemoryDatabase, gateway: PaymentGateway) -> FastAPI:
    """Create test application instance."""
    application = create_app()
    application.state.db = db
    application.state.payment_gateway = gateway
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def storefront_client(app: FastAPI) -> Generator[StorefrontClient, None, None]:
    """Storefront client wired to the in-process API."""
    with StorefrontClient(http=TestClient(app)) as client:
        yield client
