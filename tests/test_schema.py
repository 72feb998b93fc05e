"""Tests for schema.py: metadata round trip, epoch sentinels and request
value types.
"""
from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from conftest import make_chunk
from legis_rag.dates import OPEN_ENDED_EPOCH, UNDATED_EPOCH, to_epoch_day
from legis_rag.schema import (
    ChatRequest,
    Dated,
    LegislativeChunk,
    RetrievalQuery,
    RetrievalResult,
    Undated,
)


class TestToMetadata:
    def test_contains_contract_keys(self, chunk_d):
        metadata = chunk_d.to_metadata()
        for key in (
            "document_id",
            "title",
            "document_type",
            "issuing_authority",
            "document_number",
            "effective_date",
            "expiration_date",
            "effective_year",
            "effective_month",
            "effective_date_epoch",
            "expiration_date_epoch",
            "chunk_index",
            "total_chunks",
            "generation",
            "subject_area",
            "key_provisions",
        ):
            assert key in metadata

    def test_epoch_fields(self, chunk_d):
        metadata = chunk_d.to_metadata()
        assert metadata["effective_date_epoch"] == to_epoch_day(date(2024, 1, 1))
        assert metadata["expiration_date_epoch"] == to_epoch_day(date(2025, 8, 31))
        assert metadata["effective_year"] == 2024
        assert metadata["effective_month"] == 1

    def test_open_ended_chunk_gets_sentinel(self, chunk_a):
        metadata = chunk_a.to_metadata()
        assert metadata["expiration_date_epoch"] == OPEN_ENDED_EPOCH
        assert "expiration_date" not in metadata

    def test_undated_chunk_gets_sentinel(self):
        metadata = make_chunk("X-00", "someday").to_metadata()
        assert metadata["effective_date_epoch"] == UNDATED_EPOCH
        assert metadata["effective_date"] == "someday"
        assert "effective_year" not in metadata

    def test_values_are_scalars(self, chunk_d):
        assert all(isinstance(value, (str, int, float, bool)) for value in chunk_d.to_metadata().values())


class TestFromMetadata:
    def test_round_trip(self, chunk_d):
        rebuilt = LegislativeChunk.from_metadata(chunk_d.chunk_id, chunk_d.text, chunk_d.to_metadata())
        assert rebuilt == chunk_d

    def test_tolerates_missing_metadata(self):
        chunk = LegislativeChunk.from_metadata("X-00", "text", None)
        assert chunk.effective_date is None
        assert chunk.generation == "first"
        assert chunk.subject_area == "general"

    def test_keeps_malformed_dates_raw(self):
        chunk = LegislativeChunk.from_metadata("X-00", "text", {"effective_date": "Sept 2025"})
        assert chunk.effective_date == "Sept 2025"


class TestRequestValues:
    def test_query_mode(self):
        assert RetrievalQuery("q", date(2025, 1, 1)).mode == Dated(date(2025, 1, 1))
        assert RetrievalQuery("q").mode == Undated()

    def test_mode_names(self):
        assert Dated(date(2025, 1, 1)).name == "dated"
        assert Undated().name == "undated"

    def test_result_provenance(self, chunk_a, chunk_b):
        result = RetrievalResult(surviving_chunks=(chunk_b, chunk_a), rendered_context="ctx")
        assert result.provenance_chunk_ids == [chunk_b.chunk_id, chunk_a.chunk_id]
        assert result.mode == Undated()

    def test_values_are_immutable(self, chunk_a):
        with pytest.raises(FrozenInstanceError):
            chunk_a.effective_date = "2030-01-01"
        with pytest.raises(FrozenInstanceError):
            ChatRequest("q").context_date = "2025-01-01"
