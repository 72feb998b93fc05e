"""Shared pytest fixtures for legis_rag unit tests."""
from __future__ import annotations

from datetime import date

import numpy as np
import pytest
from loguru import logger

from legis_rag.errors import FilterNotSupportedError
from legis_rag.schema import LegislativeChunk

QUERY_DATE = date(2025, 9, 10)


def make_chunk(chunk_id: str, effective_date: str | None = "2024-01-01", **overrides) -> LegislativeChunk:
    fields = {
        "chunk_id": chunk_id,
        "source_document_id": chunk_id.rsplit("-", 1)[0],
        "text": f"Text of {chunk_id}.",
        "title": f"Act {chunk_id}",
        "document_type": "Federal Legislation",
        "issuing_authority": "United States Congress",
        "document_number": f"H.R. {chunk_id}",
        "effective_date": effective_date,
    }
    fields.update(overrides)
    return LegislativeChunk(**fields)


# ---------------------------------------------------------------------------
# Reference chunks: A in force, B supersedes A, C not yet in force, D expired
# ---------------------------------------------------------------------------


@pytest.fixture()
def chunk_a() -> LegislativeChunk:
    return make_chunk(
        "speed-2024-00",
        "2024-01-01",
        title="Highway Speed Limit Modernization Act of 2024",
        text="The speed limit on rural interstate highways shall be 75 miles per hour.",
    )


@pytest.fixture()
def chunk_b() -> LegislativeChunk:
    return make_chunk(
        "speed-2025-00",
        "2025-09-01",
        title="Automated Vehicle Speed Integration Act of 2025",
        text="The rural interstate speed limit is increased to 80 miles per hour.",
        generation="second",
    )


@pytest.fixture()
def chunk_c() -> LegislativeChunk:
    return make_chunk(
        "speed-2025b-00",
        "2025-10-01",
        title="Rural Speed Pilot Act",
        text="A pilot program raises rural limits to 90 miles per hour.",
        generation="second",
    )


@pytest.fixture()
def chunk_d() -> LegislativeChunk:
    return make_chunk(
        "speed-temp-00",
        "2024-01-01",
        title="Temporary Work Zone Speed Act",
        text="Work zone limits of 45 miles per hour apply until further notice.",
        expiration_date="2025-08-31",
    )


@pytest.fixture()
def candidates(chunk_a, chunk_b, chunk_c, chunk_d) -> list[LegislativeChunk]:
    """Upstream similarity order: D, A, C, B."""
    return [chunk_d, chunk_a, chunk_c, chunk_b]


# ---------------------------------------------------------------------------
# Test doubles for the external collaborators
# ---------------------------------------------------------------------------


class FakeStore:
    """Vector store double that returns canned candidates and records calls."""

    def __init__(
        self,
        chunks: list[LegislativeChunk],
        supports_filter_expressions: bool = True,
        filter_error: Exception | None = None,
        search_error: Exception | None = None,
    ):
        self.chunks = list(chunks)
        self.supports_filter_expressions = supports_filter_expressions
        self.filter_error = filter_error
        self.search_error = search_error
        self.calls: list[dict] = []

    def add(self, chunks):
        self.chunks.extend(chunks)

    def has_document(self, document_id: str) -> bool:
        return any(chunk.source_document_id == document_id for chunk in self.chunks)

    def search(self, query_text, top_k, similarity_threshold, filter_expression=None):
        self.calls.append(
            {
                "query_text": query_text,
                "top_k": top_k,
                "similarity_threshold": similarity_threshold,
                "filter_expression": filter_expression,
            }
        )
        if filter_expression is not None:
            if not self.supports_filter_expressions:
                raise FilterNotSupportedError("no filters here")
            if self.filter_error is not None:
                raise self.filter_error
        if self.search_error is not None:
            raise self.search_error
        return list(self.chunks[:top_k])


class FakeGenerator:
    """Generation double returning a fixed answer and streaming it word by word."""

    model_name = "fake-model"

    def __init__(self, answer: str = "The limit is 80 miles per hour.", error: Exception | None = None):
        self.answer = answer
        self.error = error
        self.prompts: list[str] = []
        self.stream_closed = False
        self.deltas_sent = 0

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.answer

    async def stream(self, prompt: str):
        self.prompts.append(prompt)
        try:
            if self.error is not None:
                raise self.error
            for word in self.answer.split(" "):
                self.deltas_sent += 1
                yield word + " "
        finally:
            self.stream_closed = True


@pytest.fixture()
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


# ---------------------------------------------------------------------------
# Deterministic embeddings and log capture
# ---------------------------------------------------------------------------

VOCABULARY = ("speed", "cannabis", "visa", "baggage", "park")


def keyword_embed(texts: list[str]) -> np.ndarray:
    """Bag-of-keywords vectors so similarity is predictable without an API."""
    rows = []
    for text in texts:
        lowered = text.lower()
        row = [float(lowered.count(word)) for word in VOCABULARY]
        row.append(0.1)
        rows.append(row)
    return np.array(rows, dtype=np.float32)


@pytest.fixture()
def log_records():
    """Capture loguru records emitted during a test."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG", format="{message}")
    yield records
    logger.remove(handler_id)
