"""Request-scoped orchestration of temporal retrieval and generation.

Each request picks its :data:`~legis_rag.schema.RetrievalMode` once, up
front:

- ``Dated``: hybrid-filtered search, effective-date predicate, recency
  ranking, and the prompt with full temporal instructions.
- ``Undated``: plain similarity search in upstream order and the simplified
  prompt.

Retrieval always completes before the generation model is called. The
advisor holds no per-request state, so one instance can serve any number of
concurrent callers.
"""
from __future__ import annotations

import asyncio
import uuid
from contextlib import aclosing
from dataclasses import dataclass
from datetime import date
from typing import AsyncIterator, Sequence

from opentelemetry import context as otel_context
from opentelemetry import trace

from .coordinator import HybridFilterCoordinator
from .dates import extract_date_from_text, format_date_for_display, is_blank_date, parse_context_date
from .errors import GenerationUnavailableError, ServiceUnavailableError
from .generation import GenerationModel
from .logging import get_logger
from .prompting import (
    DATED_PLACEHOLDERS,
    DEFAULT_DATED_TEMPLATE,
    DEFAULT_UNDATED_TEMPLATE,
    UNDATED_PLACEHOLDERS,
    assemble,
)
from .ranking import rank_by_recency
from .schema import (
    ChatRequest,
    ChatResponse,
    Dated,
    LegislativeChunk,
    RetrievalMode,
    RetrievalQuery,
    RetrievalResult,
    StreamEvent,
    Undated,
)
from .settings import RetrievalSettings
from .tracing import (
    ATTR_INPUT_VALUE,
    ATTR_LLM_MODEL_NAME,
    ATTR_OUTPUT_VALUE,
    ATTR_RETRIEVAL_CANDIDATES,
    ATTR_RETRIEVAL_CONTEXT_DATE,
    ATTR_RETRIEVAL_DOCUMENTS,
    ATTR_RETRIEVAL_MALFORMED_DATES,
    ATTR_RETRIEVAL_MODE,
    ATTR_RETRIEVAL_STORE_FILTER,
    OUTPUT_PREVIEW_CHARS,
    get_tracer,
    record_failure,
)
from .vector_store import VectorStore

log = get_logger("advisor")


@dataclass(frozen=True, slots=True)
class AdvisorConfig:
    """Validated construction parameters for :class:`RetrievalAdvisor`."""

    top_k: int = 5
    similarity_threshold: float = 0.5
    max_context_chars: int = 12000
    dated_template: str = DEFAULT_DATED_TEMPLATE
    undated_template: str = DEFAULT_UNDATED_TEMPLATE
    extract_date_from_query: bool = False

    def __post_init__(self) -> None:
        if self.top_k < 1:
            raise ValueError(f"top_k must be at least 1, got {self.top_k}")
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError(f"similarity_threshold must be within [0, 1], got {self.similarity_threshold}")
        if self.max_context_chars <= 0:
            raise ValueError(f"max_context_chars must be positive, got {self.max_context_chars}")
        for name, template, placeholders in (
            ("dated_template", self.dated_template, DATED_PLACEHOLDERS),
            ("undated_template", self.undated_template, UNDATED_PLACEHOLDERS),
        ):
            missing = [placeholder for placeholder in placeholders if placeholder not in template]
            if missing:
                raise ValueError(f"{name} is missing placeholders: {', '.join(missing)}")

    @classmethod
    def from_settings(cls, settings: RetrievalSettings) -> AdvisorConfig:
        return cls(
            top_k=settings.top_k,
            similarity_threshold=settings.similarity_threshold,
            max_context_chars=settings.max_context_chars,
            extract_date_from_query=settings.extract_date_from_query,
        )


class RetrievalAdvisor:
    """Tie temporal retrieval, prompt assembly and generation together."""

    def __init__(
        self,
        store: VectorStore,
        generator: GenerationModel,
        config: AdvisorConfig | None = None,
        tracer: trace.Tracer | None = None,
    ):
        self.coordinator = HybridFilterCoordinator(store)
        self.generator = generator
        self.config = config or AdvisorConfig()
        self.tracer = tracer or get_tracer("legis_rag.advisor")

    # ------------------------------------------------------------------
    # Before phase
    # ------------------------------------------------------------------

    def resolve_mode(self, request: ChatRequest) -> RetrievalMode:
        """Pick the dated or undated path for ``request``.

        An unparseable context date downgrades the request to ``Undated``
        instead of failing it.
        """
        context_date = parse_context_date(request.context_date)
        if context_date is None and not is_blank_date(request.context_date):
            log.warning(
                "Context date {!r} could not be parsed; answering without a date filter",
                request.context_date,
            )
        if context_date is None and self.config.extract_date_from_query:
            context_date = extract_date_from_text(request.query_text)
            if context_date is not None:
                log.info("Using reference date {} found in the question", context_date)
        if context_date is None:
            return Undated()
        return Dated(context_date)

    def retrieve(
        self,
        query_text: str,
        mode: RetrievalMode,
        parent_context: otel_context.Context | None = None,
    ) -> RetrievalResult:
        """Run retrieval and prompt assembly for one request.

        Raises:
            RetrievalUnavailableError: If the vector store cannot be reached.
        """
        with self.tracer.start_as_current_span("retrieval", context=parent_context) as span:
            span.set_attribute(ATTR_INPUT_VALUE, query_text)
            span.set_attribute(ATTR_RETRIEVAL_MODE, mode.name)

            if isinstance(mode, Dated):
                query = self._query(query_text, mode.context_date)
                candidates = self.coordinator.search(query)
                ranked = rank_by_recency(candidates.chunks)
                span.set_attribute(ATTR_RETRIEVAL_CONTEXT_DATE, mode.context_date.isoformat())
                span.set_attribute(ATTR_RETRIEVAL_CANDIDATES, candidates.candidate_count)
                span.set_attribute(ATTR_RETRIEVAL_STORE_FILTER, candidates.store_filter_applied)
                span.set_attribute(ATTR_RETRIEVAL_MALFORMED_DATES, candidates.malformed_dates)
                log.info(
                    "Dated retrieval for {}: {} of {} candidates in force",
                    format_date_for_display(mode.context_date),
                    len(ranked),
                    candidates.candidate_count,
                )
                rendered = self._assemble(query_text, ranked, mode)
            else:
                ranked = self.coordinator.similarity_search(self._query(query_text, None))
                span.set_attribute(ATTR_RETRIEVAL_CANDIDATES, len(ranked))
                log.info("Undated retrieval: {} candidates", len(ranked))
                rendered = self._assemble(query_text, ranked, mode)

            span.set_attribute(ATTR_RETRIEVAL_DOCUMENTS, len(ranked))
            return RetrievalResult(surviving_chunks=tuple(ranked), rendered_context=rendered, mode=mode)

    # ------------------------------------------------------------------
    # Blocking call
    # ------------------------------------------------------------------

    def answer(self, request: ChatRequest) -> ChatResponse:
        """Answer one request synchronously.

        Raises:
            ServiceUnavailableError: If the store or the model is unavailable.
        """
        conversation_id = request.conversation_id or str(uuid.uuid4())
        with self.tracer.start_as_current_span("legis-advisor") as span:
            span.set_attribute(ATTR_INPUT_VALUE, request.query_text)
            try:
                result = self.retrieve(request.query_text, self.resolve_mode(request))
                answer_text = self._complete(result.rendered_context)
            except ServiceUnavailableError as exc:
                log.error("Request {} failed: {}", conversation_id, exc)
                raise
            span.set_attribute(ATTR_OUTPUT_VALUE, answer_text[:OUTPUT_PREVIEW_CHARS])

        return ChatResponse(
            answer_text=answer_text,
            conversation_id=conversation_id,
            provenance_chunk_ids=result.provenance_chunk_ids,
        )

    def _complete(self, prompt: str) -> str:
        with self.tracer.start_as_current_span("generation") as span:
            span.set_attribute(ATTR_LLM_MODEL_NAME, getattr(self.generator, "model_name", ""))
            try:
                answer_text = self.generator.complete(prompt)
            except ServiceUnavailableError:
                raise
            except Exception as exc:
                raise GenerationUnavailableError(f"Generation failed: {exc}") from exc
            span.set_attribute(ATTR_OUTPUT_VALUE, answer_text[:OUTPUT_PREVIEW_CHARS])
            return answer_text

    # ------------------------------------------------------------------
    # Streaming call
    # ------------------------------------------------------------------

    async def astream(self, request: ChatRequest) -> AsyncIterator[StreamEvent]:
        """Answer one request, relaying generated text as it arrives.

        Retrieval and prompt assembly run to completion in a worker thread
        before the first token is requested. Every event carries the
        provenance of the retrieved set. Closing the iterator or cancelling
        the consuming task cancels the in-flight generation call.
        """
        conversation_id = request.conversation_id or str(uuid.uuid4())
        # Spans are started manually: an async generator may be resumed from
        # a different context than the one that created it.
        span = self.tracer.start_span("legis-advisor", attributes={ATTR_INPUT_VALUE: request.query_text})
        parent_context = trace.set_span_in_context(span)
        try:
            mode = self.resolve_mode(request)
            result = await asyncio.to_thread(self.retrieve, request.query_text, mode, parent_context)
            provenance = result.provenance_chunk_ids

            async with aclosing(self._stream_generation(result.rendered_context, parent_context)) as deltas:
                async for delta in deltas:
                    yield StreamEvent(
                        delta=delta,
                        conversation_id=conversation_id,
                        provenance_chunk_ids=list(provenance),
                    )
        except Exception as exc:
            log.error("Streaming request {} failed: {}", conversation_id, exc)
            record_failure(span, exc)
            raise
        finally:
            span.end()

    async def _stream_generation(self, prompt: str, parent_context: otel_context.Context) -> AsyncIterator[str]:
        span = self.tracer.start_span(
            "generation",
            context=parent_context,
            attributes={ATTR_LLM_MODEL_NAME: getattr(self.generator, "model_name", "")},
        )
        pieces: list[str] = []
        try:
            async with aclosing(self.generator.stream(prompt)) as deltas:
                async for delta in deltas:
                    pieces.append(delta)
                    yield delta
            span.set_attribute(ATTR_OUTPUT_VALUE, "".join(pieces)[:OUTPUT_PREVIEW_CHARS])
        except ServiceUnavailableError as exc:
            record_failure(span, exc)
            raise
        except Exception as exc:
            record_failure(span, exc)
            raise GenerationUnavailableError(f"Streaming generation failed: {exc}") from exc
        finally:
            span.end()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _query(self, query_text: str, context_date: date | None) -> RetrievalQuery:
        return RetrievalQuery(
            text=query_text,
            context_date=context_date,
            top_k=self.config.top_k,
            similarity_threshold=self.config.similarity_threshold,
        )

    def _assemble(self, query_text: str, ranked: Sequence[LegislativeChunk], mode: RetrievalMode) -> str:
        return assemble(
            query_text,
            ranked,
            mode.context_date if isinstance(mode, Dated) else None,
            max_context_chars=self.config.max_context_chars,
            dated_template=self.config.dated_template,
            undated_template=self.config.undated_template,
        )
