"""OpenRouter-based embedding provider — calls the /embeddings endpoint.

Default model: google/gemini-embedding-001, requested at 768 dimensions.
The dimension is a per-deployment constant and is not checked against
what the service returns.
"""

import asyncio
import logging
from typing import Any

import httpx

from app.application.interfaces.embedding_provider import EmbeddingProvider
from app.domain.exceptions import ConfigurationError, EmbeddingProviderError

logger = logging.getLogger(__name__)

_DEFAULT_MAX_CHARS = 8000  # model token limit, expressed in characters
_DEFAULT_BATCH_SIZE = 10
_DEFAULT_BATCH_PAUSE_MS = 100


class OpenRouterEmbeddingProvider(EmbeddingProvider):
    """Infrastructure adapter — generates embeddings via OpenRouter /embeddings API.

    ``embed_batch`` sends each group of ``batch_size`` texts concurrently
    (one request per text) and sleeps ``batch_pause_ms`` between groups to
    stay under the provider's rate limit.
    """

    provider_name = "openrouter"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        app_name: str = "Library Retrieval",
        model: str = "google/gemini-embedding-001",
        model_dimensions: int = 768,
        *,
        max_chars: int = _DEFAULT_MAX_CHARS,
        batch_size: int = _DEFAULT_BATCH_SIZE,
        batch_pause_ms: int = _DEFAULT_BATCH_PAUSE_MS,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not api_key or not api_key.strip():
            raise ConfigurationError("An OpenRouter API key is required for embeddings")
        if model_dimensions <= 0:
            raise ConfigurationError(f"Embedding dimensions must be positive, got {model_dimensions}")
        if batch_size <= 0:
            raise ConfigurationError(f"Embedding batch size must be positive, got {batch_size}")

        self._api_key = api_key.strip()
        self._base_url = base_url.rstrip("/")
        self._app_name = app_name
        self._model = model
        self._dimensions = model_dimensions
        self._max_chars = max_chars
        self._batch_size = batch_size
        self._batch_pause = batch_pause_ms / 1000
        self._http_client = http_client

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "X-Title": self._app_name,
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=120.0)

    async def embed(self, text: str) -> list[float]:
        """Embed one text, truncated to the character ceiling."""
        client = await self._get_client()
        should_close = self._http_client is None
        try:
            return await self._request_embedding(client, text)
        finally:
            if should_close:
                await client.aclose()

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed texts in concurrent groups, preserving input order."""
        if not texts:
            return []

        client = await self._get_client()
        should_close = self._http_client is None
        embeddings: list[list[float]] = []

        try:
            for group_start in range(0, len(texts), self._batch_size):
                group = texts[group_start : group_start + self._batch_size]
                results = await asyncio.gather(
                    *(self._request_embedding(client, text) for text in group)
                )
                embeddings.extend(results)

                if group_start + self._batch_size < len(texts):
                    await asyncio.sleep(self._batch_pause)
        finally:
            if should_close:
                await client.aclose()

        logger.info(
            "Generated %d embeddings (model=%s, dims=%d)",
            len(embeddings),
            self._model,
            len(embeddings[0]) if embeddings else 0,
        )
        return embeddings

    async def _request_embedding(self, client: httpx.AsyncClient, text: str) -> list[float]:
        url = f"{self._base_url}/embeddings"
        payload: dict[str, Any] = {
            "model": self._model,
            "input": [text[: self._max_chars]],
            "dimensions": self._dimensions,
        }

        try:
            response = await client.post(url, headers=self._get_headers(), json=payload)
        except httpx.HTTPError as exc:
            raise EmbeddingProviderError(self.provider_name, 0, str(exc)) from exc

        if response.status_code != 200:
            error_text = response.text[:500]
            logger.error("Embedding API error %d: %s", response.status_code, error_text)
            raise EmbeddingProviderError(self.provider_name, response.status_code, error_text)

        data = response.json()
        items = data.get("data") or []
        if not items:
            raise EmbeddingProviderError(
                self.provider_name, response.status_code, "Response contained no embeddings"
            )
        return [float(v) for v in items[0]["embedding"]]
