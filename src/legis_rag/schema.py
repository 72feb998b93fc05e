from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .dates import (
    OPEN_ENDED_EPOCH,
    Generation,
    UNDATED_EPOCH,
    parse_iso_date,
    to_epoch_day,
)


@dataclass(frozen=True, slots=True)
class LegislativeChunk:
    """Retrievable unit of legislative text with temporal metadata.

    Dates are kept as they arrived from the store (normally ISO strings) so
    malformed values survive until the effective-date predicate sees them.
    """

    chunk_id: str
    source_document_id: str
    text: str
    title: str = ""
    document_type: str = ""
    issuing_authority: str = ""
    document_number: str = ""
    effective_date: str | None = None
    expiration_date: str | None = None
    publication_date: str | None = None
    chunk_index: int = 0
    total_chunks: int = 1
    generation: str = Generation.FIRST.value
    subject_area: str = "general"
    key_provisions: str = ""

    def to_metadata(self) -> dict[str, Any]:
        """Flatten into the scalar-only metadata written to the vector store."""
        effective = parse_iso_date(self.effective_date)
        expiration = parse_iso_date(self.expiration_date)

        metadata: dict[str, Any] = {
            "document_id": self.source_document_id,
            "title": self.title,
            "document_type": self.document_type,
            "issuing_authority": self.issuing_authority,
            "document_number": self.document_number,
            "chunk_index": self.chunk_index,
            "total_chunks": self.total_chunks,
            "generation": self.generation,
            "subject_area": self.subject_area,
            "key_provisions": self.key_provisions,
            "effective_date_epoch": to_epoch_day(effective) if effective else UNDATED_EPOCH,
            "expiration_date_epoch": to_epoch_day(expiration) if expiration else OPEN_ENDED_EPOCH,
        }
        if self.effective_date:
            metadata["effective_date"] = str(self.effective_date)
        if effective:
            metadata["effective_year"] = effective.year
            metadata["effective_month"] = effective.month
        if self.expiration_date:
            metadata["expiration_date"] = str(self.expiration_date)
        if self.publication_date:
            metadata["publication_date"] = str(self.publication_date)
        return metadata

    @classmethod
    def from_metadata(cls, chunk_id: str, text: str, metadata: dict[str, Any] | None) -> LegislativeChunk:
        """Rebuild a chunk from store metadata, tolerating missing keys."""
        metadata = metadata or {}
        return cls(
            chunk_id=chunk_id,
            source_document_id=str(metadata.get("document_id", "")),
            text=text,
            title=str(metadata.get("title", "")),
            document_type=str(metadata.get("document_type", "")),
            issuing_authority=str(metadata.get("issuing_authority", "")),
            document_number=str(metadata.get("document_number", "")),
            effective_date=_optional_str(metadata.get("effective_date")),
            expiration_date=_optional_str(metadata.get("expiration_date")),
            publication_date=_optional_str(metadata.get("publication_date")),
            chunk_index=int(metadata.get("chunk_index", 0)),
            total_chunks=int(metadata.get("total_chunks", 1)),
            generation=str(metadata.get("generation", Generation.FIRST.value)),
            subject_area=str(metadata.get("subject_area", "general")),
            key_provisions=str(metadata.get("key_provisions", "")),
        )


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True, slots=True)
class Dated:
    """Retrieval restricted to law in force on ``context_date``."""

    context_date: date

    @property
    def name(self) -> str:
        return "dated"


@dataclass(frozen=True, slots=True)
class Undated:
    """Plain similarity retrieval with no temporal constraint."""

    @property
    def name(self) -> str:
        return "undated"


RetrievalMode = Dated | Undated


@dataclass(frozen=True, slots=True)
class RetrievalQuery:
    """One user turn's retrieval parameters."""

    text: str
    context_date: date | None = None
    top_k: int = 5
    similarity_threshold: float = 0.5

    @property
    def mode(self) -> RetrievalMode:
        if self.context_date is None:
            return Undated()
        return Dated(self.context_date)


@dataclass(frozen=True, slots=True)
class RetrievalResult:
    """Surviving chunks in rank order plus the prompt rendered from them."""

    surviving_chunks: tuple[LegislativeChunk, ...]
    rendered_context: str
    mode: RetrievalMode = field(default_factory=Undated)

    @property
    def provenance_chunk_ids(self) -> list[str]:
        return [chunk.chunk_id for chunk in self.surviving_chunks]


@dataclass(frozen=True, slots=True)
class ChatRequest:
    """Caller-facing request; ``context_date`` may be a date or raw string."""

    query_text: str
    context_date: date | str | None = None
    conversation_id: str | None = None


@dataclass(frozen=True, slots=True)
class ChatResponse:
    answer_text: str
    conversation_id: str
    provenance_chunk_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class StreamEvent:
    """One partial generation output with provenance attached."""

    delta: str
    conversation_id: str
    provenance_chunk_ids: list[str] = field(default_factory=list)
