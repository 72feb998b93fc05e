"""Tests for evaluation.py: temporal retrieval metrics and aggregation."""
from __future__ import annotations

import pytest

from conftest import QUERY_DATE
from legis_rag.evaluation import (
    EvalRow,
    TemporalQueryExample,
    evaluate_single,
    groundedness_score,
    reciprocal_rank,
    recall_at_k,
    summarize,
    version_leakage_rate,
)


@pytest.fixture()
def query(chunk_a, chunk_b, chunk_c) -> TemporalQueryExample:
    return TemporalQueryExample(
        query_id="Q-1",
        question="What is the speed limit?",
        context_date=QUERY_DATE,
        expected_document_ids=(chunk_b.source_document_id,),
        disallowed_document_ids=(chunk_c.source_document_id,),
    )


class TestRecallAtK:
    def test_hit_within_k(self, query, chunk_a, chunk_b):
        assert recall_at_k([chunk_a, chunk_b], query, k=2) == 1.0

    def test_hit_outside_k(self, query, chunk_a, chunk_b):
        assert recall_at_k([chunk_a, chunk_b], query, k=1) == 0.0

    def test_partial_recall(self, query, chunk_a, chunk_b):
        both = TemporalQueryExample(
            "Q-2", "q", QUERY_DATE, (chunk_a.source_document_id, chunk_b.source_document_id)
        )
        assert recall_at_k([chunk_b], both) == 0.5


class TestReciprocalRank:
    def test_second_position(self, query, chunk_a, chunk_b):
        assert reciprocal_rank([chunk_a, chunk_b], query) == pytest.approx(0.5)

    def test_miss(self, query, chunk_a):
        assert reciprocal_rank([chunk_a], query) == 0.0


class TestVersionLeakageRate:
    def test_clean_results(self, query, chunk_a, chunk_b):
        assert version_leakage_rate([chunk_b, chunk_a], query) == 0.0

    def test_future_and_expired_chunks_leak(self, query, chunk_a, chunk_c, chunk_d):
        assert version_leakage_rate([chunk_a, chunk_c, chunk_d], query) == pytest.approx(2 / 3)

    def test_empty_results(self, query):
        assert version_leakage_rate([], query) == 0.0


class TestGroundedness:
    def test_full_overlap(self):
        assert groundedness_score("speed limit 80", ["The speed limit is 80"]) == 1.0

    def test_empty_answer(self):
        assert groundedness_score("", ["anything"]) == 0.0


class TestEvaluateSingle:
    def test_row_values(self, query, chunk_a, chunk_b):
        seen = {}

        def retrieve(question, context_date):
            seen["args"] = (question, context_date)
            return [chunk_b, chunk_a]

        row = evaluate_single(query, retrieve, lambda question, contexts: contexts[0])

        assert seen["args"] == (query.question, QUERY_DATE)
        assert row.query_id == "Q-1"
        assert row.recall_at_k == 1.0
        assert row.mrr == 1.0
        assert row.version_leakage == 0.0
        assert row.groundedness == 1.0
        assert row.latency_ms >= 0.0


class TestSummarize:
    def test_means(self):
        rows = [EvalRow("a", 1.0, 1.0, 0.0, 10.0, 1.0), EvalRow("b", 0.0, 0.5, 0.5, 30.0, 0.0)]
        summary = summarize(rows)
        assert summary["recall_at_k"] == 0.5
        assert summary["mrr"] == 0.75
        assert summary["version_leakage"] == 0.25
        assert summary["latency_ms"] == 20.0

    def test_empty(self):
        assert summarize([]) == {
            "recall_at_k": 0.0,
            "mrr": 0.0,
            "version_leakage": 0.0,
            "latency_ms": 0.0,
            "groundedness": 0.0,
        }
