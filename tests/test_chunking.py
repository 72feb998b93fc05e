"""Tests for chunking.py: paragraph packing and the metadata stamped on
every chunk.
"""
from __future__ import annotations

from datetime import date

import pytest

from legis_rag.chunking import chunk_act
from legis_rag.corpus import SAMPLE_ACTS, ActTemplate


def _act(content: str, **overrides) -> ActTemplate:
    fields = {
        "title": "Highway Speed Limit Modernization Act of 2024",
        "content": content,
        "document_type": "Federal Legislation",
        "effective_date": date(2024, 1, 1),
        "publication_date": date(2023, 12, 15),
        "issuing_authority": "United States Congress",
        "document_number": "H.R. 2024-001",
        "key_provisions": ("75 mph rural interstate", "65 mph urban highway"),
    }
    fields.update(overrides)
    return ActTemplate(**fields)


class TestChunkAct:
    def test_short_act_is_one_chunk(self):
        chunks = chunk_act(_act("SECTION 1.\nShort text."))
        assert len(chunks) == 1
        assert chunks[0].text == "SECTION 1.\nShort text."
        assert chunks[0].total_chunks == 1

    def test_packs_paragraphs_up_to_size(self):
        content = "\n\n".join(["a" * 40, "b" * 40, "c" * 40])
        chunks = chunk_act(_act(content), chunk_size=90)
        assert [chunk.text for chunk in chunks] == ["a" * 40 + "\n\n" + "b" * 40, "c" * 40]

    def test_hard_splits_oversized_paragraph(self):
        chunks = chunk_act(_act("x" * 250), chunk_size=100)
        assert [len(chunk.text) for chunk in chunks] == [100, 100, 50]

    def test_every_chunk_respects_size(self):
        for act in SAMPLE_ACTS:
            assert all(len(chunk.text) <= 300 for chunk in chunk_act(act, chunk_size=300))

    def test_metadata_is_stamped(self):
        chunks = chunk_act(_act("\n\n".join(["p" * 60] * 3)), chunk_size=70)
        assert [chunk.chunk_index for chunk in chunks] == [0, 1, 2]
        assert {chunk.total_chunks for chunk in chunks} == {3}
        first = chunks[0]
        assert first.chunk_id == "h-r--2024-001-00"
        assert first.source_document_id == "h-r--2024-001"
        assert first.effective_date == "2024-01-01"
        assert first.publication_date == "2023-12-15"
        assert first.expiration_date is None
        assert first.generation == "first"
        assert first.subject_area == "transportation"
        assert first.key_provisions == "75 mph rural interstate, 65 mph urban highway"

    def test_second_generation_and_expiration(self):
        chunk = chunk_act(
            _act("text", effective_date=date(2025, 9, 1), expiration_date=date(2027, 1, 1))
        )[0]
        assert chunk.generation == "second"
        assert chunk.expiration_date == "2027-01-01"

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            chunk_act(_act("text"), chunk_size=0)
