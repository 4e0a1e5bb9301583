"""Integration tests for the library and cache endpoints over a SQLite database."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import get_settings
from app.infrastructure.database.session import get_session_factory
from app.infrastructure.dependencies import get_embedding_provider, get_search_cache
from app.main import app


class FakeEmbeddingProvider:
    """Two-axis embeddings: 'gracia' texts point one way, everything else the other."""

    @property
    def dimensions(self) -> int:
        return 2

    def _vector(self, text: str) -> list[float]:
        return [1.0, 0.0] if "gracia" in text else [0.0, 1.0]

    async def embed(self, text):
        return self._vector(text)

    async def embed_batch(self, texts):
        return [self._vector(t) for t in texts]


@pytest_asyncio.fixture
async def client(session_factory):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_embedding_provider] = FakeEmbeddingProvider
    get_search_cache.cache_clear()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http

    app.dependency_overrides.clear()
    get_search_cache.cache_clear()


def _index_body(text: str, **overrides) -> dict:
    body = {
        "title": "Sermones sobre la gracia",
        "author": "Spurgeon",
        "user_id": "user-1",
        "text_content": text,
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_index_status_search_and_delete(client):
    response = await client.post("/api/v1/library/resources/res-1/index", json=_index_body("gracia " * 300))
    assert response.status_code == 200
    data = response.json()
    assert data["chunk_count"] == 3
    assert data["chunks"][0]["id"] == "res-1_chunk_0"
    assert data["chunks"][0]["has_embedding"] is True
    assert data["chunks"][0]["citation"] == 'Spurgeon, "Sermones sobre la gracia", p. 1'

    status = await client.get("/api/v1/library/resources/res-1/index")
    assert status.json() == {"resource_id": "res-1", "indexed": True}

    chunks = await client.get("/api/v1/library/resources/res-1/chunks")
    assert [c["chunk_index"] for c in chunks.json()] == [0, 1, 2]

    search = await client.post("/api/v1/library/search", json={"query": "gracia", "user_id": "user-1", "top_k": 2})
    assert search.status_code == 200
    hits = search.json()
    assert hits["total"] == 2
    assert hits["results"][0]["score"] == pytest.approx(1.0)

    deleted = await client.delete("/api/v1/library/resources/res-1/index")
    assert deleted.json() == {"resource_id": "res-1", "deleted": 3}

    status = await client.get("/api/v1/library/resources/res-1/index")
    assert status.json()["indexed"] is False

    missing = await client.get("/api/v1/library/resources/res-1/chunks")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_maintenance_routes_work_without_embedding_key(client, monkeypatch):
    await client.post("/api/v1/library/resources/res-1/index", json=_index_body("gracia " * 300))

    del app.dependency_overrides[get_embedding_provider]
    monkeypatch.setattr(get_settings(), "openrouter_api_key", "")

    status = await client.get("/api/v1/library/resources/res-1/index")
    assert status.status_code == 200
    assert status.json()["indexed"] is True

    chunks = await client.get("/api/v1/library/resources/res-1/chunks")
    assert chunks.status_code == 200
    assert len(chunks.json()) == 3

    search = await client.post("/api/v1/library/search", json={"query": "gracia", "user_id": "user-1"})
    assert search.status_code == 503

    reindex = await client.post(
        "/api/v1/library/resources/res-1/index", json=_index_body("gracia " * 300, force=True)
    )
    assert reindex.status_code == 503

    deleted = await client.delete("/api/v1/library/resources/res-1/index")
    assert deleted.status_code == 200
    assert deleted.json() == {"resource_id": "res-1", "deleted": 3}


@pytest.mark.asyncio
async def test_search_other_owner_sees_nothing(client):
    await client.post("/api/v1/library/resources/res-1/index", json=_index_body("gracia " * 300))

    search = await client.post("/api/v1/library/search", json={"query": "gracia", "user_id": "user-2"})

    assert search.json()["results"] == []


@pytest.mark.asyncio
async def test_index_with_custom_chunking_options(client):
    body = _index_body("palabra " * 250, options={"target_size": 500, "overlap": 0, "min_size": 100})

    response = await client.post("/api/v1/library/resources/res-2/index", json=body)

    assert response.json()["chunk_count"] == 4


@pytest.mark.asyncio
async def test_index_request_validation(client):
    response = await client.post("/api/v1/library/resources/res-1/index", json={"title": "x"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_artifact_cache_put_then_get(client):
    put = await client.put(
        "/api/v1/cache/quiz",
        json={"reference": "Romans 12:1-2", "language": "Spanish", "payload": {"questions": ["¿?"]}},
    )
    assert put.status_code == 200
    assert put.json()["key"] == "rom_12_1_2_es"
    assert put.json()["usage_count"] == 1

    get = await client.get("/api/v1/cache/quiz", params={"reference": "Romanos 12:1-2", "language": "Spanish"})
    data = get.json()
    assert data["hit"] is True
    assert data["source"] == "primary"
    assert data["payload"] == {"questions": ["¿?"]}
    assert data["usage_count"] == 2


@pytest.mark.asyncio
async def test_artifact_cache_miss_is_not_an_error(client):
    response = await client.get("/api/v1/cache/syntax_analysis", params={"reference": "Salmo 23"})

    assert response.status_code == 200
    assert response.json()["hit"] is False
    assert response.json()["key"] == "psa_23_es"


@pytest.mark.asyncio
async def test_unknown_artifact_kind_is_rejected(client):
    response = await client.get("/api/v1/cache/sermon", params={"reference": "Salmo 23"})

    assert response.status_code == 422
