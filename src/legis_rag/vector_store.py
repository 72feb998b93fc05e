from __future__ import annotations

from pathlib import Path
from typing import Callable, Protocol, Sequence, runtime_checkable

import chromadb
import numpy as np

from .embeddings import cosine_similarity
from .errors import FilterNotSupportedError, RetrievalUnavailableError
from .filters import FilterExpression
from .logging import get_logger
from .schema import LegislativeChunk

log = get_logger("vector_store")

EmbedFn = Callable[[list[str]], np.ndarray]

_CHROMA_OPERATORS = {"<=": "$lte", ">=": "$gte", "<": "$lt", ">": "$gt", "==": "$eq"}


@runtime_checkable
class VectorStore(Protocol):
    """Similarity-search capability consumed by the retrieval engine."""

    supports_filter_expressions: bool

    def add(self, chunks: Sequence[LegislativeChunk]) -> None: ...

    def has_document(self, document_id: str) -> bool: ...

    def search(
        self,
        query_text: str,
        top_k: int,
        similarity_threshold: float,
        filter_expression: FilterExpression | None = None,
    ) -> list[LegislativeChunk]: ...


def build_chroma_collection(
    collection_name: str,
    persist_dir: str = "artifacts/chroma",
    reset: bool = False,
):
    """Open (or create) a persistent cosine-space Chroma collection.

    Args:
        collection_name: Chroma collection name.
        persist_dir: Local path for Chroma persistence.
        reset: Drop any existing collection with the same name first.

    Returns:
        The Chroma collection instance.
    """
    Path(persist_dir).mkdir(parents=True, exist_ok=True)
    client = chromadb.PersistentClient(path=persist_dir)
    if reset:
        # list_collections returns names on newer Chroma releases, objects on older ones.
        existing = {getattr(collection, "name", collection) for collection in client.list_collections()}
        if collection_name in existing:
            client.delete_collection(collection_name)

    return client.get_or_create_collection(name=collection_name, metadata={"hnsw:space": "cosine"})


def to_chroma_where(expression: FilterExpression) -> dict:
    """Translate a filter expression into a Chroma ``where`` clause."""
    clauses = []
    for condition in expression.conditions:
        operator = _CHROMA_OPERATORS.get(condition.operator)
        if operator is None:
            raise FilterNotSupportedError(f"Chroma has no operator for {condition.operator!r}")
        clauses.append({condition.key: {operator: condition.value}})

    if not clauses:
        raise FilterNotSupportedError("Empty filter expression")
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


class ChromaLegislationStore:
    """Vector store backed by a Chroma collection with native metadata filters."""

    supports_filter_expressions = True

    def __init__(self, collection, embed_fn: EmbedFn):
        self.collection = collection
        self.embed_fn = embed_fn

    def add(self, chunks: Sequence[LegislativeChunk]) -> None:
        if not chunks:
            return
        embeddings = self.embed_fn([chunk.text for chunk in chunks])
        self.collection.upsert(
            ids=[chunk.chunk_id for chunk in chunks],
            embeddings=np.asarray(embeddings).tolist(),
            documents=[chunk.text for chunk in chunks],
            metadatas=[chunk.to_metadata() for chunk in chunks],
        )

    def has_document(self, document_id: str) -> bool:
        response = self.collection.get(where={"document_id": document_id}, limit=1)
        return bool(response["ids"])

    def search(
        self,
        query_text: str,
        top_k: int,
        similarity_threshold: float,
        filter_expression: FilterExpression | None = None,
    ) -> list[LegislativeChunk]:
        """Query the collection and map hits back to chunks.

        Args:
            query_text: User question to embed.
            top_k: Number of nearest chunks to request.
            similarity_threshold: Minimum cosine similarity to keep a hit.
            filter_expression: Optional store-side filter.

        Returns:
            Chunks ordered by descending similarity.
        """
        where = to_chroma_where(filter_expression) if filter_expression is not None else None
        query_vector = np.asarray(self.embed_fn([query_text]))[0]

        try:
            available = self.collection.count()
            if available == 0:
                return []
            kwargs = {
                "query_embeddings": [query_vector.tolist()],
                "n_results": min(top_k, available),
                "include": ["documents", "metadatas", "distances"],
            }
            if where is not None:
                kwargs["where"] = where
            response = self.collection.query(**kwargs)
        except Exception as exc:
            raise RetrievalUnavailableError(f"Chroma query failed: {exc}") from exc

        ids = response["ids"][0]
        docs = response["documents"][0]
        metadatas = response["metadatas"][0]
        distances = response["distances"][0]

        chunks: list[LegislativeChunk] = []
        for chunk_id, text, metadata, distance in zip(ids, docs, metadatas, distances, strict=True):
            if 1.0 - float(distance) < similarity_threshold:
                continue
            chunks.append(LegislativeChunk.from_metadata(chunk_id, text or "", metadata))
        log.debug("Chroma returned {} hits, {} above threshold {}", len(ids), len(chunks), similarity_threshold)
        return chunks


class InMemoryLegislationStore:
    """NumPy cosine-similarity store without filter support."""

    supports_filter_expressions = False

    def __init__(self, embed_fn: EmbedFn):
        self.embed_fn = embed_fn
        self._chunks: list[LegislativeChunk] = []
        self._vectors: np.ndarray | None = None

    def add(self, chunks: Sequence[LegislativeChunk]) -> None:
        if not chunks:
            return
        vectors = np.asarray(self.embed_fn([chunk.text for chunk in chunks]), dtype=np.float32)
        self._chunks.extend(chunks)
        self._vectors = vectors if self._vectors is None else np.vstack([self._vectors, vectors])

    def has_document(self, document_id: str) -> bool:
        return any(chunk.source_document_id == document_id for chunk in self._chunks)

    def search(
        self,
        query_text: str,
        top_k: int,
        similarity_threshold: float,
        filter_expression: FilterExpression | None = None,
    ) -> list[LegislativeChunk]:
        if filter_expression is not None:
            raise FilterNotSupportedError("In-memory store does not evaluate filter expressions")
        if self._vectors is None:
            return []

        query_vector = np.asarray(self.embed_fn([query_text]), dtype=np.float32)[0]
        scores = cosine_similarity(query_vector, self._vectors)
        order = np.argsort(-scores, kind="stable")
        return [self._chunks[idx] for idx in order if scores[idx] >= similarity_threshold][:top_k]
