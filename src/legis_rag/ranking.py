"""Supersession ranking by recency.

Among chunks that all pass the effective-date predicate, the one with the
latest effective date is taken to be the controlling version. This is a
heuristic: explicit "supersedes" links between acts are not consulted.
"""
from __future__ import annotations

from typing import Iterable

from .dates import generation_ordinal, parse_iso_date, to_epoch_day
from .schema import LegislativeChunk


def _recency_key(chunk: LegislativeChunk) -> tuple[int, int]:
    effective = parse_iso_date(chunk.effective_date)
    if effective is not None:
        return (0, -to_epoch_day(effective))
    # Undated chunks go last; the generation label orders them among themselves.
    return (1, -generation_ordinal(chunk.generation))


def rank_by_recency(chunks: Iterable[LegislativeChunk]) -> list[LegislativeChunk]:
    """Order chunks by effective date, most recent first.

    The sort is stable, so chunks with equal effective dates keep the order
    of the upstream similarity search, and ranking a ranked list is a no-op.
    Chunks whose effective date is missing or unparseable always come after
    every dated chunk.
    """
    return sorted(chunks, key=_recency_key)
