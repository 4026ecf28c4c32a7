"""Unit tests for tracer and meter provider configuration."""

import pytest
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
    OTLPSpanExporter as GrpcOTLPSpanExporter,
)
from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
    OTLPSpanExporter as HttpOTLPSpanExporter,
)
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader, PeriodicExportingMetricReader
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SpanExporter
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import ProxyTracerProvider

from chiccloset.core.observability import create_resource, setup_metrics, tracing
from chiccloset.core.observability.metrics import BusinessMetrics, build_metric_readers
from chiccloset.core.observability.tracing import (
    build_span_exporters,
    configure_tracer_provider,
    signal_url,
)


class TestCreateResource:
    """Tests for create_resource."""

    def test_service_identity(self):
        resource = create_resource(
            "chiccloset-fashion-backend", "1.0.0", "development", "fashion-ecommerce"
        )

        assert resource.attributes["service.name"] == "chiccloset-fashion-backend"
        assert resource.attributes["service.version"] == "1.0.0"
        assert resource.attributes["deployment.environment"] == "development"
        assert resource.attributes["service.namespace"] == "fashion-ecommerce"

    def test_merged_over_sdk_defaults(self):
        resource = create_resource("svc", "1.0.0", "test")

        assert "telemetry.sdk.language" in resource.attributes
        assert "service.namespace" not in resource.attributes


class TestSignalUrl:
    """Tests for signal_url."""

    def test_appends_signal_path(self):
        assert signal_url("http://localhost:4318", "traces") == "http://localhost:4318/v1/traces"

    def test_strips_trailing_slash(self):
        assert signal_url("http://localhost:4318/", "metrics") == "http://localhost:4318/v1/metrics"

    def test_leaves_full_path_alone(self):
        url = "http://collector:4318/v1/traces"
        assert signal_url(url, "traces") == url


class TestBuildSpanExporters:
    """Tests for build_span_exporters."""

    def test_nothing_configured(self):
        assert build_span_exporters(None) == []

    def test_http_exporter(self):
        exporters = build_span_exporters("http://localhost:4318", "http/protobuf")

        assert len(exporters) == 1
        assert isinstance(exporters[0], HttpOTLPSpanExporter)

    def test_grpc_exporter(self):
        exporters = build_span_exporters("http://localhost:4317", "grpc")

        assert isinstance(exporters[0], GrpcOTLPSpanExporter)

    def test_console_exporter_added_last(self):
        exporters = build_span_exporters("http://localhost:4318", console=True)

        assert isinstance(exporters[-1], ConsoleSpanExporter)
        assert len(exporters) == 2


class TestConfigureTracerProvider:
    """Tests for configure_tracer_provider."""

    def test_reuses_registered_provider(self):
        """The session-wide test provider is returned, not replaced."""
        registered = trace.get_tracer_provider()

        provider = configure_tracer_provider(create_resource("other", "1", "test"), [])

        assert provider is registered

    def test_fresh_provider_batches_each_exporter(self, monkeypatch: pytest.MonkeyPatch):
        """With no SDK provider installed, one batch processor per exporter."""
        created: list[RecordingProcessor] = []
        installed: list[TracerProvider] = []

        def record(exporter: SpanExporter, **kwargs: int) -> RecordingProcessor:
            processor = RecordingProcessor(exporter, kwargs)
            created.append(processor)
            return processor

        monkeypatch.setattr(tracing.trace, "get_tracer_provider", ProxyTracerProvider)
        monkeypatch.setattr(tracing.trace, "set_tracer_provider", installed.append)
        monkeypatch.setattr(tracing, "BatchSpanProcessor", record)
        exporters = [InMemorySpanExporter(), ConsoleSpanExporter()]

        provider = configure_tracer_provider(create_resource("fresh", "2.0.0", "test"), exporters)

        assert installed == [provider]
        assert provider.resource.attributes["service.name"] == "fresh"
        assert [p.exporter for p in created] == exporters
        for processor in created:
            assert processor.settings == {
                "max_queue_size": 2048,
                "schedule_delay_millis": 5000,
                "export_timeout_millis": 30000,
                "max_export_batch_size": 512,
            }

    def test_fresh_provider_without_exporters(self, monkeypatch: pytest.MonkeyPatch):
        installed: list[TracerProvider] = []
        monkeypatch.setattr(tracing.trace, "get_tracer_provider", ProxyTracerProvider)
        monkeypatch.setattr(tracing.trace, "set_tracer_provider", installed.append)

        provider = configure_tracer_provider(create_resource("bare", "1", "test"), [])

        assert installed == [provider]
        assert isinstance(provider, TracerProvider)


class RecordingProcessor(SpanProcessor):
    """Stands in for BatchSpanProcessor and keeps its arguments."""

    def __init__(self, exporter: SpanExporter, settings: dict[str, int]) -> None:
        self.exporter = exporter
        self.settings = settings


class TestMetrics:
    """Tests for the metrics wiring."""

    def test_no_readers_without_destinations(self):
        assert build_metric_readers(None) == []

    def test_console_reader(self):
        readers = build_metric_readers(None, console=True, export_interval_ms=1000)

        assert len(readers) == 1
        assert isinstance(readers[0], PeriodicExportingMetricReader)
        readers[0].shutdown()

    def test_setup_metrics_reuses_registered_provider(self):
        provider = setup_metrics(create_resource("svc", "1", "test"), [])

        assert isinstance(provider, MeterProvider)

    def test_business_metrics_instruments(self):
        """Every business instrument records through its own meter."""
        reader = InMemoryMetricReader()
        provider = MeterProvider(metric_readers=[reader])
        instruments = BusinessMetrics(provider.get_meter("test"))

        instruments.cart_additions.add(2, {"action": "new_item"})
        instruments.revenue.add(89.99, {"stage": "cart_addition"})
        instruments.checkout_duration.record(1200.0)

        data = reader.get_metrics_data()
        names = {
            metric.name
            for rm in data.resource_metrics
            for sm in rm.scope_metrics
            for metric in sm.metrics
        }
        assert {"cart.additions", "revenue", "checkout.duration"} <= names
        provider.shutdown()
