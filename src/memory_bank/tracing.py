"""OpenTelemetry tracing helpers for memory bank operations.

Search and generation calls can be wrapped so each call is recorded as a span
with its query (or prompt) and outcome:

    from memory_bank.tracing import configure_tracing, get_tracer, traced_search
    from memory_bank.retrieval import search

    configure_tracing()   # ConsoleSpanExporter unless an endpoint/exporter is given
    tracer = get_tracer("memory-bank.search")
    hits = traced_search(search, tracer)("deployment pipeline", corpus)

Pass ``endpoint="http://localhost:6006/v1/traces"`` to ship spans to an OTLP
collector instead of stdout.
"""
from __future__ import annotations

from typing import Callable

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
)

from .schema import SearchHit

ATTR_INPUT_VALUE = "input.value"
ATTR_OUTPUT_VALUE = "output.value"
ATTR_LLM_MODEL_NAME = "llm.model_name"
ATTR_SEARCH_HITS = "memory_bank.search.hits"
ATTR_SEARCH_TOP_SCORE = "memory_bank.search.top_score"
ATTR_CORPUS_SIZE = "memory_bank.corpus.documents"

_provider: TracerProvider | None = None


def configure_tracing(
    endpoint: str | None = None,
    service_name: str = "memory-bank",
    exporter: SpanExporter | None = None,
) -> TracerProvider:
    """Create and register the global TracerProvider.

    Args:
        endpoint: OTLP HTTP endpoint. Ignored when `exporter` is given; when
            both are *None* spans go to :class:`ConsoleSpanExporter`.
        service_name: Service label reported to the tracing backend.
        exporter: Pre-built exporter, e.g. an ``InMemorySpanExporter`` in tests.

    Returns:
        The configured provider, also installed as the global provider.
    """
    global _provider

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))

    if exporter is not None:
        chosen_exporter: SpanExporter = exporter
    elif endpoint is not None:
        try:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
                OTLPSpanExporter,
            )
        except ImportError as exc:  # pragma: no cover
            raise ImportError(
                "opentelemetry-exporter-otlp-proto-http is required to export "
                "traces to an OTLP endpoint. Install the 'otlp' extra."
            ) from exc
        chosen_exporter = OTLPSpanExporter(endpoint=endpoint)
    else:
        chosen_exporter = ConsoleSpanExporter()

    provider.add_span_processor(SimpleSpanProcessor(chosen_exporter))
    trace.set_tracer_provider(provider)
    _provider = provider
    return provider


def get_tracer(name: str) -> trace.Tracer:
    """Return a tracer from the configured provider, or the no-op global one."""
    if _provider is not None:
        return _provider.get_tracer(name)
    return trace.get_tracer(name)


def traced_search(
    search_fn: Callable[[str, dict[str, str]], list[SearchHit]],
    tracer: trace.Tracer,
) -> Callable[[str, dict[str, str]], list[SearchHit]]:
    """Wrap a search callable so each call records a ``memory-bank.search`` span.

    The span carries the query, the corpus size, the number of hits and the
    best score. Exceptions set the span status to ERROR and are re-raised.
    """

    def _wrapped(query: str, corpus: dict[str, str]) -> list[SearchHit]:
        with tracer.start_as_current_span("memory-bank.search") as span:
            span.set_attribute(ATTR_INPUT_VALUE, query)
            span.set_attribute(ATTR_CORPUS_SIZE, len(corpus))
            try:
                hits = search_fn(query, corpus)
                span.set_attribute(ATTR_SEARCH_HITS, len(hits))
                if hits:
                    span.set_attribute(ATTR_SEARCH_TOP_SCORE, hits[0].relevance_score)
                span.set_status(trace.StatusCode.OK)
                return hits
            except Exception as exc:
                span.set_status(trace.StatusCode.ERROR, str(exc))
                span.record_exception(exc)
                raise

    return _wrapped


def traced_generation(
    generate_fn: Callable[..., str],
    tracer: trace.Tracer,
    model_name: str = "",
) -> Callable[..., str]:
    """Wrap a ``(prompt, **kwargs) -> str`` generator in a ``generation`` span.

    Records the prompt, the model name when given, and the first 500
    characters of the output.
    """

    def _wrapped(prompt: str, **kwargs) -> str:
        with tracer.start_as_current_span("generation") as span:
            span.set_attribute(ATTR_INPUT_VALUE, prompt)
            if model_name:
                span.set_attribute(ATTR_LLM_MODEL_NAME, model_name)
            try:
                output = generate_fn(prompt, **kwargs)
                span.set_attribute(ATTR_OUTPUT_VALUE, output[:500])
                span.set_status(trace.StatusCode.OK)
                return output
            except Exception as exc:
                span.set_status(trace.StatusCode.ERROR, str(exc))
                span.record_exception(exc)
                raise

    return _wrapped
