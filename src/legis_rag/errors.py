"""Exception hierarchy for the temporal retrieval engine.

Degradations that preserve correctness (malformed chunk dates, malformed
caller dates, unsupported store filters, empty results) are absorbed inside
the engine. Availability failures of the vector store or the chat model
propagate as :class:`ServiceUnavailableError` subclasses so the API layer can
map them to user copy.
"""
from __future__ import annotations


class LegislationRAGError(Exception):
    """Base class for all errors raised by ``legis_rag``."""


class FilterNotSupportedError(LegislationRAGError):
    """A filter expression cannot be expressed in the store's dialect."""


class ServiceUnavailableError(LegislationRAGError):
    """A remote collaborator failed or timed out.

    ``user_message`` is safe to show to end users; the underlying exception
    is chained as ``__cause__`` for operators.
    """

    default_user_message = "The legislation service is temporarily unavailable. Please try again later."

    def __init__(self, message: str, user_message: str | None = None) -> None:
        super().__init__(message)
        self.user_message = user_message or self.default_user_message


class RetrievalUnavailableError(ServiceUnavailableError):
    default_user_message = "Legislation search is temporarily unavailable. Please try again later."


class GenerationUnavailableError(ServiceUnavailableError):
    default_user_message = "The answer service is temporarily unavailable. Please try again later."


class EmbeddingUnavailableError(RetrievalUnavailableError):
    """The embeddings API failed; no store query can succeed until it recovers."""
