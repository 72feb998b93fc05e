from __future__ import annotations

import numpy as np
from openai import APIConnectionError, APITimeoutError, InternalServerError, OpenAI, OpenAIError, RateLimitError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .errors import EmbeddingUnavailableError
from .logging import get_logger

log = get_logger("embeddings")

TRANSIENT_OPENAI_ERRORS = (APIConnectionError, APITimeoutError, RateLimitError, InternalServerError)


@retry(
    reraise=True,
    stop=stop_after_attempt(2),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
    retry=retry_if_exception_type(TRANSIENT_OPENAI_ERRORS),
)
def _create_embeddings(client: OpenAI, texts: list[str], model: str):
    return client.embeddings.create(model=model, input=texts)


def embed_texts(
    texts: list[str],
    model: str = "text-embedding-3-small",
    client: OpenAI | None = None,
) -> np.ndarray:
    """Generate embedding vectors for input texts using OpenAI embeddings API.

    Args:
        texts: Input strings to embed.
        model: Embedding model name.
        client: Optional preconfigured OpenAI client.

    Returns:
        A `float32` NumPy matrix shaped `(len(texts), embedding_dim)`.

    Raises:
        EmbeddingUnavailableError: If the embeddings API keeps failing.
    """
    client = client or OpenAI()
    try:
        response = _create_embeddings(client, texts, model)
    except OpenAIError as exc:
        log.error("Embedding request failed for {} texts: {}", len(texts), exc)
        raise EmbeddingUnavailableError(f"Embedding request failed: {exc}") from exc
    vectors = [row.embedding for row in response.data]
    return np.array(vectors, dtype=np.float32)


def cosine_similarity(query_vector: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Compute cosine similarity between one query vector and many vectors.

    Args:
        query_vector: Query embedding vector.
        matrix: Candidate embedding matrix where each row is one vector.

    Returns:
        A 1D array of cosine similarity scores aligned to matrix rows.
    """
    query_norm = np.linalg.norm(query_vector)
    matrix_norm = np.linalg.norm(matrix, axis=1)
    denominator = np.maximum(query_norm * matrix_norm, 1e-12)
    return (matrix @ query_vector) / denominator
