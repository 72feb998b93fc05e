"""Temporal retrieval over versioned legislation."""

from .advisor import AdvisorConfig, RetrievalAdvisor
from .schema import (
    ChatRequest,
    ChatResponse,
    Dated,
    LegislativeChunk,
    RetrievalQuery,
    RetrievalResult,
    StreamEvent,
    Undated,
)

__all__ = [
    "AdvisorConfig",
    "RetrievalAdvisor",
    "ChatRequest",
    "ChatResponse",
    "Dated",
    "Undated",
    "LegislativeChunk",
    "RetrievalQuery",
    "RetrievalResult",
    "StreamEvent",
]
