from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(slots=True)
class OpenAISettings:
    """Runtime model configuration for embedding and generation calls."""

    embedding_model: str = "text-embedding-3-small"
    chat_model: str = "gpt-4.1-mini"
    request_timeout_s: float = 30.0


@dataclass(slots=True)
class RetrievalSettings:
    """Tuning knobs for temporal retrieval and prompt assembly."""

    top_k: int = 5
    similarity_threshold: float = 0.5
    max_context_chars: int = 12000
    extract_date_from_query: bool = False


@dataclass(slots=True)
class Paths:
    """Common project paths used by ingestion and the Chroma store."""

    data_dir: str = "data"
    artifacts_dir: str = "artifacts"
    chroma_dir: str = "artifacts/chroma"
    collection_name: str = "legislation"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> tuple[OpenAISettings, RetrievalSettings, Paths]:
    """Load environment-backed settings and return typed config objects.

    Returns:
        Tuple of OpenAI model settings, retrieval settings and path settings.
    """
    load_dotenv()
    return (
        OpenAISettings(
            embedding_model=os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small"),
            chat_model=os.getenv("OPENAI_CHAT_MODEL", "gpt-4.1-mini"),
            request_timeout_s=float(os.getenv("OPENAI_TIMEOUT_S", "30")),
        ),
        RetrievalSettings(
            top_k=int(os.getenv("LEGIS_TOP_K", "5")),
            similarity_threshold=float(os.getenv("LEGIS_SIMILARITY_THRESHOLD", "0.5")),
            max_context_chars=int(os.getenv("LEGIS_MAX_CONTEXT_CHARS", "12000")),
            extract_date_from_query=_env_bool("LEGIS_EXTRACT_DATE_FROM_QUERY", False),
        ),
        Paths(
            chroma_dir=os.getenv("LEGIS_CHROMA_DIR", "artifacts/chroma"),
            collection_name=os.getenv("LEGIS_COLLECTION", "legislation"),
        ),
    )
