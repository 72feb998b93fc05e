from __future__ import annotations

from .corpus import ActTemplate, document_id_for, infer_subject_area
from .dates import generation_for
from .schema import LegislativeChunk


def _split_paragraphs(text: str, chunk_size: int) -> list[str]:
    """Pack paragraphs into segments of at most ``chunk_size`` characters.

    A paragraph longer than ``chunk_size`` on its own is cut into fixed-width
    pieces.
    """
    segments: list[str] = []
    current = ""
    for paragraph in (piece.strip() for piece in text.split("\n\n")):
        if not paragraph:
            continue
        candidate = f"{current}\n\n{paragraph}" if current else paragraph
        if len(candidate) <= chunk_size:
            current = candidate
            continue

        if current:
            segments.append(current)
            current = ""
        if len(paragraph) <= chunk_size:
            current = paragraph
            continue
        for start in range(0, len(paragraph), chunk_size):
            segments.append(paragraph[start : start + chunk_size])

    if current:
        segments.append(current)
    return segments


def chunk_act(template: ActTemplate, chunk_size: int = 1200) -> list[LegislativeChunk]:
    """Split one act into chunks carrying the act's temporal metadata.

    Args:
        template: Act to split.
        chunk_size: Maximum number of characters per chunk.

    Returns:
        Chunks in document order; every chunk repeats the act's dates.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    document_id = document_id_for(template.document_number)
    segments = _split_paragraphs(template.content, chunk_size) or [template.content]
    expiration = template.expiration_date.isoformat() if template.expiration_date else None

    return [
        LegislativeChunk(
            chunk_id=f"{document_id}-{index:02d}",
            source_document_id=document_id,
            text=segment,
            title=template.title,
            document_type=template.document_type,
            issuing_authority=template.issuing_authority,
            document_number=template.document_number,
            effective_date=template.effective_date.isoformat(),
            expiration_date=expiration,
            publication_date=template.publication_date.isoformat(),
            chunk_index=index,
            total_chunks=len(segments),
            generation=generation_for(template.effective_date),
            subject_area=infer_subject_area(template.title),
            key_provisions=", ".join(template.key_provisions),
        )
        for index, segment in enumerate(segments)
    ]
