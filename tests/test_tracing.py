"""Tests for tracing.py: configure_tracing, get_tracer, record_failure and
the spans the advisor emits through the configured provider.

No OpenAI API key is needed. OTel spans are collected with InMemorySpanExporter
so tests run fully offline.
"""
from __future__ import annotations

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from conftest import QUERY_DATE, FakeGenerator, FakeStore, make_chunk
from legis_rag.advisor import RetrievalAdvisor
from legis_rag.schema import ChatRequest
from legis_rag.tracing import (
    ATTR_INPUT_VALUE,
    ATTR_OUTPUT_VALUE,
    ATTR_RETRIEVAL_MALFORMED_DATES,
    ATTR_RETRIEVAL_STORE_FILTER,
    OUTPUT_PREVIEW_CHARS,
    configure_tracing,
    get_tracer,
    record_failure,
)


# ---------------------------------------------------------------------------
# Shared in-memory exporter fixture
# ---------------------------------------------------------------------------


@pytest.fixture()
def mem_exporter() -> InMemorySpanExporter:
    """Fresh InMemorySpanExporter and a configured TracerProvider."""
    exporter = InMemorySpanExporter()
    configure_tracing(exporter=exporter, service_name="test-service")
    return exporter


# ---------------------------------------------------------------------------
# configure_tracing
# ---------------------------------------------------------------------------


class TestConfigureTracing:
    def test_returns_tracer_provider(self):
        provider = configure_tracing(exporter=InMemorySpanExporter())
        assert isinstance(provider, TracerProvider)

    def test_service_name_on_resource(self):
        provider = configure_tracing(exporter=InMemorySpanExporter(), service_name="legis-test")
        assert provider.resource.attributes["service.name"] == "legis-test"

    def test_missing_otlp_package_raises_import_error(self, monkeypatch):
        """When otlp exporter package is absent, a helpful ImportError is raised."""
        import builtins

        real_import = builtins.__import__

        def mock_import(name, *args, **kwargs):
            if "otlp" in name:
                raise ImportError("mocked missing package")
            return real_import(name, *args, **kwargs)

        monkeypatch.setattr(builtins, "__import__", mock_import)
        with pytest.raises(ImportError, match="opentelemetry-exporter-otlp"):
            configure_tracing(endpoint="http://localhost:6006/v1/traces")


# ---------------------------------------------------------------------------
# get_tracer / record_failure
# ---------------------------------------------------------------------------


class TestGetTracer:
    def test_spans_reach_configured_exporter(self, mem_exporter):
        with get_tracer("test.component").start_as_current_span("probe") as span:
            span.set_attribute(ATTR_INPUT_VALUE, "hello")

        spans = mem_exporter.get_finished_spans()
        assert [s.name for s in spans] == ["probe"]
        assert spans[0].attributes[ATTR_INPUT_VALUE] == "hello"


class TestRecordFailure:
    def test_sets_error_status_and_event(self, mem_exporter):
        span = get_tracer("test").start_span("failing")
        record_failure(span, RuntimeError("store down"))
        span.end()

        finished = mem_exporter.get_finished_spans()[0]
        assert finished.status.status_code == StatusCode.ERROR
        assert finished.status.description == "store down"
        assert any(event.name == "exception" for event in finished.events)


# ---------------------------------------------------------------------------
# Advisor spans through the configured provider
# ---------------------------------------------------------------------------


class TestAdvisorSpans:
    def test_default_tracer_uses_configured_provider(self, mem_exporter, candidates):
        RetrievalAdvisor(FakeStore(candidates), FakeGenerator()).answer(ChatRequest("speed?", QUERY_DATE))
        names = {span.name for span in mem_exporter.get_finished_spans()}
        assert names == {"legis-advisor", "retrieval", "generation"}

    def test_output_value_truncated(self, mem_exporter, candidates):
        advisor = RetrievalAdvisor(FakeStore(candidates), FakeGenerator(answer="x" * 1000))
        advisor.answer(ChatRequest("speed?"))

        root = next(s for s in mem_exporter.get_finished_spans() if s.name == "legis-advisor")
        assert len(root.attributes[ATTR_OUTPUT_VALUE]) == OUTPUT_PREVIEW_CHARS

    def test_filter_fallback_and_data_quality_attributes(self, mem_exporter, chunk_a):
        store = FakeStore([chunk_a, make_chunk("BAD-00", "someday")], filter_error=RuntimeError("dialect"))
        RetrievalAdvisor(store, FakeGenerator()).answer(ChatRequest("speed?", QUERY_DATE))

        retrieval = next(s for s in mem_exporter.get_finished_spans() if s.name == "retrieval")
        assert retrieval.attributes[ATTR_RETRIEVAL_STORE_FILTER] is False
        assert retrieval.attributes[ATTR_RETRIEVAL_MALFORMED_DATES] == 1
