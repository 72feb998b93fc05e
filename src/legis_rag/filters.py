"""Store-native filter expressions for date-restricted vector search.

Expressions are backend-neutral: each store translates them into its own
dialect and raises :class:`~legis_rag.errors.FilterNotSupportedError` when
it cannot.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .dates import to_epoch_day

SUPPORTED_OPERATORS = ("<=", ">=", "<", ">", "==")


@dataclass(frozen=True, slots=True)
class FilterCondition:
    key: str
    operator: str
    value: int | float | str

    def __post_init__(self) -> None:
        if self.operator not in SUPPORTED_OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.operator!r}")

    def to_text(self) -> str:
        return f"{self.key} {self.operator} {self.value}"


@dataclass(frozen=True, slots=True)
class FilterExpression:
    """Conjunction of simple comparisons."""

    conditions: tuple[FilterCondition, ...]

    def to_text(self) -> str:
        return " && ".join(condition.to_text() for condition in self.conditions)


def build_date_filter(query_date: date) -> FilterExpression:
    """Expression selecting chunks in force on ``query_date``.

    Relies on the epoch sentinels written at ingestion time, so undated and
    open-ended chunks always match.
    """
    epoch_day = to_epoch_day(query_date)
    return FilterExpression(
        conditions=(
            FilterCondition("effective_date_epoch", "<=", epoch_day),
            FilterCondition("expiration_date_epoch", ">=", epoch_day),
        )
    )
