"""Effective-date predicate: is a chunk legally in force on a given date?

Boundaries are inclusive on both ends. Malformed dates fail open: the chunk
is kept and the problem is reported as a data-quality warning, never raised.
"""
from __future__ import annotations

from datetime import date
from typing import Iterable

from .dates import is_blank_date, parse_iso_date
from .logging import get_logger
from .schema import LegislativeChunk

log = get_logger("data_quality")


def malformed_date_fields(chunk: LegislativeChunk) -> list[str]:
    """Names of temporal fields that are present but not valid ISO dates."""
    fields: list[str] = []
    for name in ("effective_date", "expiration_date"):
        raw = getattr(chunk, name)
        if not is_blank_date(raw) and parse_iso_date(raw) is None:
            fields.append(name)
    return fields


def is_effective(chunk: LegislativeChunk, query_date: date | None) -> bool:
    """Return whether ``chunk`` is in force on ``query_date``.

    Args:
        chunk: Candidate chunk with raw temporal metadata.
        query_date: Reference date, or ``None`` for no temporal constraint.

    Returns:
        ``False`` only when the chunk provably starts after ``query_date`` or
        provably expired before it.
    """
    if query_date is None:
        return True

    effective = parse_iso_date(chunk.effective_date)
    if effective is None:
        if not is_blank_date(chunk.effective_date):
            log.warning(
                "Chunk {} has unparseable effective_date {!r}; including it",
                chunk.chunk_id,
                chunk.effective_date,
            )
        return True

    if effective > query_date:
        return False

    expiration = parse_iso_date(chunk.expiration_date)
    if expiration is None:
        if not is_blank_date(chunk.expiration_date):
            log.warning(
                "Chunk {} has unparseable expiration_date {!r}; treating it as open-ended",
                chunk.chunk_id,
                chunk.expiration_date,
            )
        return True

    return expiration >= query_date


def filter_effective(chunks: Iterable[LegislativeChunk], query_date: date | None) -> list[LegislativeChunk]:
    """Keep the chunks in force on ``query_date``, preserving input order."""
    return [chunk for chunk in chunks if is_effective(chunk, query_date)]
