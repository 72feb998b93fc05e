from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Iterable

from openai import OpenAI

from .advisor import AdvisorConfig, RetrievalAdvisor
from .chunking import chunk_act
from .corpus import SAMPLE_ACTS, ActTemplate, document_id_for
from .embeddings import embed_texts
from .generation import OpenAIGenerationModel
from .logging import get_logger
from .settings import OpenAISettings, Paths, RetrievalSettings, load_settings
from .vector_store import ChromaLegislationStore, VectorStore, build_chroma_collection

log = get_logger("pipeline")


@dataclass(slots=True)
class IngestionResult:
    """Outcome of ingesting one act."""

    document_id: str
    chunks_created: int
    success: bool
    message: str


def ingest_acts(
    store: VectorStore,
    acts: Iterable[ActTemplate] = SAMPLE_ACTS,
    chunk_size: int = 1200,
) -> list[IngestionResult]:
    """Chunk and index acts, skipping any already present in ``store``.

    A failure on one act is reported in its result and does not stop the
    remaining acts from being ingested.

    Args:
        store: Destination vector store.
        acts: Acts to ingest.
        chunk_size: Maximum characters per chunk.

    Returns:
        One result per act, in input order.
    """
    results: list[IngestionResult] = []
    for act in acts:
        document_id = document_id_for(act.document_number)
        try:
            if store.has_document(document_id):
                log.info("Skipping {}: already indexed", act.title)
                results.append(IngestionResult(document_id, 0, True, "already indexed"))
                continue
            chunks = chunk_act(act, chunk_size=chunk_size)
            store.add(chunks)
        except Exception as exc:
            log.error("Failed to ingest {}: {}", act.title, exc)
            results.append(IngestionResult(document_id, 0, False, str(exc)))
            continue

        log.info("Indexed {} ({} chunks, effective {})", act.title, len(chunks), act.effective_date)
        results.append(IngestionResult(document_id, len(chunks), True, "indexed"))
    return results


def build_store(
    openai_settings: OpenAISettings,
    paths: Paths,
    client: OpenAI | None = None,
    reset: bool = False,
) -> ChromaLegislationStore:
    """Open the persistent Chroma store with OpenAI embeddings."""
    collection = build_chroma_collection(
        collection_name=paths.collection_name,
        persist_dir=paths.chroma_dir,
        reset=reset,
    )
    embed_fn = partial(embed_texts, model=openai_settings.embedding_model, client=client)
    return ChromaLegislationStore(collection, embed_fn)


def build_advisor(
    store: VectorStore | None = None,
    settings: tuple[OpenAISettings, RetrievalSettings, Paths] | None = None,
    ingest_samples: bool = False,
) -> RetrievalAdvisor:
    """Wire settings, store and generation model into a ready advisor.

    Args:
        store: Vector store to use; the persistent Chroma store when omitted.
        settings: Pre-loaded settings; read from the environment when omitted.
        ingest_samples: Index the bundled sample acts before returning.

    Returns:
        A configured :class:`RetrievalAdvisor`.
    """
    openai_settings, retrieval_settings, paths = settings or load_settings()
    if store is None:
        store = build_store(openai_settings, paths)
    if ingest_samples:
        ingest_acts(store)

    generator = OpenAIGenerationModel(
        model=openai_settings.chat_model,
        timeout_s=openai_settings.request_timeout_s,
    )
    return RetrievalAdvisor(store, generator, AdvisorConfig.from_settings(retrieval_settings))
