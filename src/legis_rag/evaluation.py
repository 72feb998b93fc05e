from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import re
import time
from typing import Callable, Sequence

from .predicate import is_effective
from .schema import LegislativeChunk

RetrieveFn = Callable[[str, date], Sequence[LegislativeChunk]]
AnswerFn = Callable[[str, list[str]], str]


@dataclass(frozen=True, slots=True)
class TemporalQueryExample:
    """Evaluation query with the document versions it should and must not surface."""

    query_id: str
    question: str
    context_date: date
    expected_document_ids: tuple[str, ...]
    disallowed_document_ids: tuple[str, ...] = field(default_factory=tuple)


@dataclass(slots=True)
class EvalRow:
    """Single-query evaluation output used for aggregate reporting."""

    query_id: str
    recall_at_k: float
    mrr: float
    version_leakage: float
    latency_ms: float
    groundedness: float


def _normalize(text: str) -> set[str]:
    """Normalize text to comparable lowercase token set for overlap checks."""
    return set(re.findall(r"[a-zA-Z0-9-]+", text.lower()))


def recall_at_k(results: Sequence[LegislativeChunk], query: TemporalQueryExample, k: int = 5) -> float:
    """Share of expected documents that appear among the first ``k`` chunks."""
    if not query.expected_document_ids:
        return 0.0
    found = {chunk.source_document_id for chunk in results[:k]}
    hits = sum(1 for document_id in query.expected_document_ids if document_id in found)
    return hits / len(query.expected_document_ids)


def reciprocal_rank(results: Sequence[LegislativeChunk], query: TemporalQueryExample) -> float:
    """Compute reciprocal rank for the first chunk of an expected document."""
    for rank, chunk in enumerate(results, start=1):
        if chunk.source_document_id in query.expected_document_ids:
            return 1.0 / rank
    return 0.0


def version_leakage_rate(results: Sequence[LegislativeChunk], query: TemporalQueryExample) -> float:
    """Share of returned chunks that should not have been visible on the query date.

    A chunk leaks when it belongs to a disallowed document version or is not
    in force on ``query.context_date``. Temporal retrieval targets ``0.0``.
    """
    if not results:
        return 0.0
    leaked = sum(
        1
        for chunk in results
        if chunk.source_document_id in query.disallowed_document_ids
        or not is_effective(chunk, query.context_date)
    )
    return leaked / len(results)


def groundedness_score(answer: str, contexts: list[str]) -> float:
    """Estimate groundedness as lexical overlap between answer and contexts."""
    answer_tokens = _normalize(answer)
    if not answer_tokens:
        return 0.0

    context_tokens: set[str] = set()
    for context in contexts:
        context_tokens.update(_normalize(context))

    overlap = len(answer_tokens.intersection(context_tokens))
    return overlap / max(len(answer_tokens), 1)


def evaluate_single(
    query: TemporalQueryExample,
    retrieve_fn: RetrieveFn,
    answer_fn: AnswerFn,
    top_k: int = 5,
) -> EvalRow:
    """Run dated retrieval + generation for one query and compute core metrics.

    Args:
        query: Query example with expected and disallowed document versions.
        retrieve_fn: Callable taking ``(question, context_date)`` and returning ranked chunks.
        answer_fn: Callable that generates answer text from question + contexts.
        top_k: Number of chunks considered for metrics and answer grounding.

    Returns:
        `EvalRow` with recall, MRR, leakage, latency, and groundedness values.
    """
    started = time.perf_counter()
    retrieved = list(retrieve_fn(query.question, query.context_date))
    contexts = [chunk.text for chunk in retrieved[:top_k]]
    answer = answer_fn(query.question, contexts)
    elapsed_ms = (time.perf_counter() - started) * 1000

    return EvalRow(
        query_id=query.query_id,
        recall_at_k=recall_at_k(retrieved, query, k=top_k),
        mrr=reciprocal_rank(retrieved, query),
        version_leakage=version_leakage_rate(retrieved[:top_k], query),
        latency_ms=elapsed_ms,
        groundedness=groundedness_score(answer, contexts),
    )


def summarize(rows: list[EvalRow]) -> dict[str, float]:
    """Aggregate per-query metrics into simple mean summary values."""
    metrics = ("recall_at_k", "mrr", "version_leakage", "latency_ms", "groundedness")
    if not rows:
        return {metric: 0.0 for metric in metrics}
    return {metric: sum(getattr(row, metric) for row in rows) / len(rows) for metric in metrics}
