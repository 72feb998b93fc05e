"""OpenTelemetry tracing helpers for the temporal retrieval engine.

The advisor opens one ``legis-advisor`` span per request with ``retrieval``
and ``generation`` children. Attribute names follow the OpenInference
conventions where one exists, plus a few ``retrieval.*`` extensions for the
temporal filter.

Usage with an OTLP backend such as Arize Phoenix:

    from legis_rag.tracing import configure_tracing

    configure_tracing(endpoint="http://localhost:6006/v1/traces")

Without a backend (development / testing):

    configure_tracing()   # uses ConsoleSpanExporter by default
"""
from __future__ import annotations

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor, SpanExporter

# ---------------------------------------------------------------------------
# Attribute names
# ---------------------------------------------------------------------------

ATTR_INPUT_VALUE = "input.value"
ATTR_OUTPUT_VALUE = "output.value"
ATTR_LLM_MODEL_NAME = "llm.model_name"
ATTR_RETRIEVAL_DOCUMENTS = "retrieval.documents"
ATTR_RETRIEVAL_MODE = "retrieval.mode"
ATTR_RETRIEVAL_CONTEXT_DATE = "retrieval.context_date"
ATTR_RETRIEVAL_CANDIDATES = "retrieval.candidates"
ATTR_RETRIEVAL_STORE_FILTER = "retrieval.store_filter_applied"
ATTR_RETRIEVAL_MALFORMED_DATES = "retrieval.malformed_dates"

OUTPUT_PREVIEW_CHARS = 500

# ---------------------------------------------------------------------------
# Provider lifecycle helpers
# ---------------------------------------------------------------------------

_provider: TracerProvider | None = None


def configure_tracing(
    endpoint: str | None = None,
    service_name: str = "legis-rag",
    exporter: SpanExporter | None = None,
) -> TracerProvider:
    """Create and register a global TracerProvider.

    Args:
        endpoint: OTLP HTTP endpoint URL to send traces to. When *None* and no
            custom *exporter* is given, spans are printed to stdout.
        service_name: Label identifying this application in the backend.
        exporter: An already-constructed exporter, e.g. an
            ``InMemorySpanExporter`` in tests. When provided, *endpoint* is
            ignored.

    Returns:
        The configured provider, also set as the global OTel provider.
    """
    global _provider

    resource = Resource(attributes={SERVICE_NAME: service_name})
    provider = TracerProvider(resource=resource)

    if exporter is not None:
        chosen_exporter: SpanExporter = exporter
    elif endpoint is not None:
        # Import lazily so the OTLP exporter stays an optional extra.
        try:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
                OTLPSpanExporter,
            )
        except ImportError as exc:  # pragma: no cover
            raise ImportError(
                "opentelemetry-exporter-otlp-proto-http is required to export "
                "traces to an OTLP endpoint.  Install it with:\n"
                "  pip install 'legis-rag[otlp]'"
            ) from exc
        chosen_exporter = OTLPSpanExporter(endpoint=endpoint)
    else:
        chosen_exporter = ConsoleSpanExporter()

    # SimpleSpanProcessor exports synchronously, which keeps tests deterministic.
    provider.add_span_processor(SimpleSpanProcessor(chosen_exporter))
    trace.set_tracer_provider(provider)
    _provider = provider
    return provider


def get_tracer(name: str) -> trace.Tracer:
    """Return a tracer from the configured provider, or the no-op global one."""
    if _provider is not None:
        return _provider.get_tracer(name)
    return trace.get_tracer(name)


def record_failure(span: trace.Span, exc: BaseException) -> None:
    span.set_status(trace.StatusCode.ERROR, str(exc))
    span.record_exception(exc)
