"""Date parsing, validation and formatting helpers.

Two parsing regimes exist on purpose. Chunk metadata is written by the
ingestion pipeline and must be ISO ``YYYY-MM-DD``; anything else counts as
malformed (:func:`parse_iso_date`). Caller-supplied context dates come from
people and the API layer, so :func:`parse_context_date` accepts any format
``python-dateutil`` understands, provided it names a full calendar day.
Neither function raises on bad input.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum

from dateutil import parser as date_parser

from .logging import get_logger

log = get_logger("dates")

EPOCH = date(1970, 1, 1)

# Store-side filter sentinels. An undated chunk must satisfy
# ``effective_date_epoch <= N`` and an open-ended one ``expiration_date_epoch >= N``
# for every query date N.
UNDATED_EPOCH = -1_000_000_000
OPEN_ENDED_EPOCH = 1_000_000_000


class Generation(str, Enum):
    """Coarse recency marker derived from the effective year."""

    FIRST = "first"
    SECOND = "second"
    THIRD = "third"
    FOURTH = "fourth"
    FIFTH = "fifth"


GENERATION_LABELS = tuple(member.value for member in Generation)
DEFAULT_GENERATION_CUTOFFS = (2025,)

# Parsed twice against different defaults; a value that changes between the
# two runs was missing its year, month or day.
_PARSE_ANCHORS = (datetime(2000, 1, 1), datetime(2004, 2, 2))

_TEXT_DATE_PATTERNS = [
    re.compile(r"\b(\d{4}-\d{2}-\d{2})\b"),
    re.compile(
        r"\b((?:January|February|March|April|May|June|July|August|September|October|November|December)"
        r"\s+\d{1,2},?\s+\d{4})\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(\d{1,2}\s+(?:January|February|March|April|May|June|July|August|September|October|November|December)"
        r"\s+\d{4})\b",
        re.IGNORECASE,
    ),
    re.compile(r"\bas\s+of\s+(\d{4})\b", re.IGNORECASE),
]


def parse_iso_date(value: object) -> date | None:
    """Parse an ISO ``YYYY-MM-DD`` metadata value.

    Returns ``None`` for missing, empty or malformed values. ``datetime``
    instances are truncated to their date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def is_blank_date(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_context_date(value: object) -> date | None:
    """Leniently parse a caller-supplied context date; ``None`` when unusable.

    Any format ``python-dateutil`` understands is accepted as long as it names
    a year, month and day. Partial values such as "March" or "Monday" are
    rejected rather than completed from a default.
    """
    if is_blank_date(value):
        return None
    if isinstance(value, (date, datetime)):
        return parse_iso_date(value)
    if not isinstance(value, str):
        log.warning("Ignoring context date of unsupported type {}", type(value).__name__)
        return None

    text = value.strip()
    parsed = parse_iso_date(text)
    if parsed is not None:
        return parsed
    try:
        first, second = (date_parser.parse(text, default=anchor).date() for anchor in _PARSE_ANCHORS)
    except (ValueError, OverflowError) as exc:
        log.debug("Unparseable context date {!r}: {}", text, exc)
        return None
    if first != second:
        log.debug("Context date {!r} does not name a full calendar day", text)
        return None
    return first


def extract_date_from_text(text: str) -> date | None:
    """Find an explicit reference date in free text.

    Recognises ISO dates, "September 10, 2025", "10 September 2025" and
    "as of 2015" (read as January 1st of that year).
    """
    for pattern in _TEXT_DATE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        candidate = match.group(1)
        if len(candidate) == 4:
            try:
                return date(int(candidate), 1, 1)
            except ValueError:
                continue
        parsed = parse_context_date(candidate)
        if parsed is not None:
            return parsed
    return None


def to_epoch_day(value: date) -> int:
    """Days since 1970-01-01, the numeric form used in store-side filters."""
    return (value - EPOCH).days


def format_date_for_display(value: date | None) -> str:
    """Render a date as e.g. ``September 10, 2025``."""
    if value is None:
        return "current date"
    return f"{value:%B} {value.day}, {value.year}"


def generation_for(value: date | None, cutoffs: tuple[int, ...] = DEFAULT_GENERATION_CUTOFFS) -> str:
    """Coarse recency label counted from cutoff years.

    With the default cutoff of 2025, anything effective before 2025 is
    ``first`` and anything from 2025 on is ``second``.
    """
    if value is None:
        return GENERATION_LABELS[0]
    ordinal = sum(1 for year in sorted(cutoffs) if value.year >= year)
    return GENERATION_LABELS[min(ordinal, len(GENERATION_LABELS) - 1)]


def generation_ordinal(label: str) -> int:
    """Position of a generation label, ``-1`` when unknown."""
    try:
        return GENERATION_LABELS.index(label)
    except ValueError:
        return -1
