"""Hybrid store-side / in-memory temporal filtering.

The store-side filter only narrows the candidate set early; the in-memory
effective-date predicate runs on every candidate regardless and is what
guarantees temporal correctness.
"""
from __future__ import annotations

from dataclasses import dataclass

from .errors import EmbeddingUnavailableError, RetrievalUnavailableError
from .filters import FilterExpression, build_date_filter
from .logging import get_logger
from .predicate import is_effective, malformed_date_fields
from .schema import LegislativeChunk, RetrievalQuery
from .vector_store import VectorStore

log = get_logger("coordinator")


@dataclass(frozen=True, slots=True)
class CandidateSet:
    """Chunks that survived temporal filtering, in similarity order."""

    chunks: tuple[LegislativeChunk, ...]
    candidate_count: int
    store_filter_applied: bool
    malformed_dates: int


class HybridFilterCoordinator:
    """Run vector searches with a store-native date filter when possible."""

    def __init__(self, store: VectorStore, use_store_filter: bool | None = None):
        self.store = store
        if use_store_filter is None:
            use_store_filter = bool(getattr(store, "supports_filter_expressions", False))
        self.use_store_filter = use_store_filter

    def similarity_search(self, query: RetrievalQuery) -> list[LegislativeChunk]:
        """Plain similarity search with no temporal constraint."""
        try:
            return self.store.search(query.text, query.top_k, query.similarity_threshold, None)
        except RetrievalUnavailableError:
            raise
        except Exception as exc:
            raise RetrievalUnavailableError(f"Vector store search failed: {exc}") from exc

    def search(self, query: RetrievalQuery) -> CandidateSet:
        """Search, then keep only chunks in force on ``query.context_date``.

        Raises:
            RetrievalUnavailableError: If the store fails even without a filter.
            EmbeddingUnavailableError: If the query cannot be embedded. No
                unfiltered retry is made.
        """
        expression = self._build_expression(query)
        store_filter_applied = False

        if expression is None:
            candidates = self.similarity_search(query)
        else:
            try:
                candidates = self.store.search(
                    query.text, query.top_k, query.similarity_threshold, expression
                )
                store_filter_applied = True
            except EmbeddingUnavailableError:
                raise
            except Exception as exc:
                log.warning(
                    "Store-side filter {!r} failed ({}); falling back to in-memory filtering",
                    expression.to_text(),
                    exc,
                )
                candidates = self.similarity_search(query)

        malformed = sum(1 for chunk in candidates if malformed_date_fields(chunk))
        survivors = tuple(chunk for chunk in candidates if is_effective(chunk, query.context_date))
        log.debug(
            "{} of {} candidates in force on {} (store filter applied: {})",
            len(survivors),
            len(candidates),
            query.context_date,
            store_filter_applied,
        )
        return CandidateSet(
            chunks=survivors,
            candidate_count=len(candidates),
            store_filter_applied=store_filter_applied,
            malformed_dates=malformed,
        )

    def _build_expression(self, query: RetrievalQuery) -> FilterExpression | None:
        if query.context_date is None or not self.use_store_filter:
            return None
        try:
            return build_date_filter(query.context_date)
        except (ValueError, OverflowError) as exc:
            log.warning("Could not build store filter for {}: {}", query.context_date, exc)
            return None
