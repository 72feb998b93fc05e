from __future__ import annotations

from typing import AsyncIterator, Protocol, runtime_checkable

from openai import AsyncOpenAI, OpenAI, OpenAIError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .embeddings import TRANSIENT_OPENAI_ERRORS
from .errors import GenerationUnavailableError
from .logging import get_logger

log = get_logger("generation")

TEXT_DELTA_EVENT = "response.output_text.delta"


@runtime_checkable
class GenerationModel(Protocol):
    """Text-completion capability consumed by the retrieval advisor."""

    model_name: str

    def complete(self, prompt: str) -> str: ...

    def stream(self, prompt: str) -> AsyncIterator[str]: ...


class OpenAIGenerationModel:
    """Generation model backed by the OpenAI Responses API."""

    def __init__(
        self,
        model: str = "gpt-4.1-mini",
        timeout_s: float = 30.0,
        client: OpenAI | None = None,
        async_client: AsyncOpenAI | None = None,
    ):
        self.model_name = model
        self.timeout_s = timeout_s
        self._client = client
        self._async_client = async_client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(timeout=self.timeout_s)
        return self._client

    @property
    def async_client(self) -> AsyncOpenAI:
        if self._async_client is None:
            self._async_client = AsyncOpenAI(timeout=self.timeout_s)
        return self._async_client

    @retry(
        reraise=True,
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type(TRANSIENT_OPENAI_ERRORS),
    )
    def _create(self, prompt: str):
        return self.client.responses.create(model=self.model_name, input=prompt)

    def complete(self, prompt: str) -> str:
        """Generate a full answer for ``prompt``.

        Raises:
            GenerationUnavailableError: If the API keeps failing after one retry.
        """
        try:
            response = self._create(prompt)
        except OpenAIError as exc:
            log.error("Generation request to {} failed: {}", self.model_name, exc)
            raise GenerationUnavailableError(f"Generation request failed: {exc}") from exc
        return response.output_text

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        """Yield text deltas as the model produces them.

        Closing the generator (or cancelling the consuming task) closes the
        upstream HTTP stream.
        """
        try:
            upstream = await self.async_client.responses.create(
                model=self.model_name, input=prompt, stream=True
            )
        except OpenAIError as exc:
            log.error("Streaming request to {} failed: {}", self.model_name, exc)
            raise GenerationUnavailableError(f"Streaming request failed: {exc}") from exc

        try:
            async for event in upstream:
                if event.type == TEXT_DELTA_EVENT:
                    yield event.delta
        except OpenAIError as exc:
            log.error("Stream from {} broke off: {}", self.model_name, exc)
            raise GenerationUnavailableError(f"Stream interrupted: {exc}") from exc
        finally:
            await upstream.close()
