"""Unit tests for the OpenRouterEmbeddingProvider."""

import asyncio
import json

import httpx
import pytest

from app.domain.exceptions import ConfigurationError, EmbeddingProviderError
from app.infrastructure.openrouter import OpenRouterEmbeddingProvider


# ── Helpers ──


def _vector_for(text: str) -> list[float]:
    """Deterministic fake embedding: encodes the input length."""
    return [float(len(text)), 1.0, 0.0]


class RecordingTransport:
    """Mock /embeddings endpoint recording requests and peak concurrency."""

    def __init__(self, status_code: int = 200, body: dict | None = None):
        self.status_code = status_code
        self.body = body
        self.requests: list[dict] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.01)
        self.in_flight -= 1

        if self.status_code != 200 or self.body is not None:
            return httpx.Response(self.status_code, json=self.body or {"error": "boom"})
        text = payload["input"][0]
        return httpx.Response(200, json={"data": [{"embedding": _vector_for(text)}]})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def _provider(transport: RecordingTransport, **kwargs) -> OpenRouterEmbeddingProvider:
    return OpenRouterEmbeddingProvider(
        api_key="sk-test",
        http_client=transport.client(),
        batch_pause_ms=0,
        **kwargs,
    )


# ── Tests ──


@pytest.mark.asyncio
async def test_embed_sends_model_and_dimensions():
    transport = RecordingTransport()
    provider = _provider(transport, model="google/gemini-embedding-001", model_dimensions=768)

    vector = await provider.embed("gracia")

    assert vector == _vector_for("gracia")
    assert transport.requests == [
        {"model": "google/gemini-embedding-001", "input": ["gracia"], "dimensions": 768}
    ]


@pytest.mark.asyncio
async def test_embed_truncates_long_input():
    transport = RecordingTransport()
    provider = _provider(transport)

    vector = await provider.embed("x" * 9000)

    assert len(transport.requests[0]["input"][0]) == 8000
    assert vector[0] == 8000.0


@pytest.mark.asyncio
async def test_embed_batch_preserves_input_order():
    transport = RecordingTransport()
    provider = _provider(transport)
    texts = ["a" * n for n in range(1, 24)]

    vectors = await provider.embed_batch(texts)

    assert [v[0] for v in vectors] == [float(n) for n in range(1, 24)]


@pytest.mark.asyncio
async def test_embed_batch_sends_groups_of_batch_size():
    """One request per text, at most ``batch_size`` in flight at once."""
    transport = RecordingTransport()
    provider = _provider(transport, batch_size=10)

    await provider.embed_batch([f"texto {i}" for i in range(25)])

    assert len(transport.requests) == 25
    assert transport.max_in_flight == 10


@pytest.mark.asyncio
async def test_embed_batch_empty_input_makes_no_requests():
    transport = RecordingTransport()

    assert await _provider(transport).embed_batch([]) == []
    assert transport.requests == []


@pytest.mark.asyncio
async def test_error_status_raises_provider_error():
    transport = RecordingTransport(status_code=429)
    provider = _provider(transport)

    with pytest.raises(EmbeddingProviderError) as exc_info:
        await provider.embed("gracia")

    assert exc_info.value.status_code == 429
    assert exc_info.value.provider == "openrouter"


@pytest.mark.asyncio
async def test_any_failure_fails_the_whole_batch():
    transport = RecordingTransport(status_code=500)

    with pytest.raises(EmbeddingProviderError):
        await _provider(transport).embed_batch(["uno", "dos", "tres"])


@pytest.mark.asyncio
async def test_empty_data_raises_provider_error():
    transport = RecordingTransport(body={"data": []})

    with pytest.raises(EmbeddingProviderError, match="no embeddings"):
        await _provider(transport).embed("gracia")


@pytest.mark.asyncio
async def test_transport_error_raises_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider = OpenRouterEmbeddingProvider(
        api_key="sk-test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(EmbeddingProviderError) as exc_info:
        await provider.embed("gracia")

    assert exc_info.value.status_code == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"api_key": ""},
        {"api_key": "   "},
        {"api_key": "sk-test", "model_dimensions": 0},
        {"api_key": "sk-test", "batch_size": 0},
    ],
)
def test_misconfiguration_fails_at_construction(kwargs):
    with pytest.raises(ConfigurationError):
        OpenRouterEmbeddingProvider(**kwargs)


def test_dimensions_property():
    provider = OpenRouterEmbeddingProvider(api_key="sk-test", model_dimensions=1536)

    assert provider.dimensions == 1536
