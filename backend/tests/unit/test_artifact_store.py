"""Unit tests for SQLAlchemyArtifactStore on a temporary SQLite database."""

import pytest

from app.domain.entities import ArtifactKind
from app.infrastructure.database.repositories import SQLAlchemyArtifactStore


@pytest.fixture
def store(session_factory) -> SQLAlchemyArtifactStore:
    return SQLAlchemyArtifactStore(session_factory)


@pytest.mark.asyncio
async def test_get_missing_returns_none(store):
    assert await store.get(ArtifactKind.QUIZ, "rom_12_1_2_es") is None


@pytest.mark.asyncio
async def test_upsert_creates_with_usage_one(store):
    artifact = await store.upsert(ArtifactKind.QUIZ, "rom_12_1_2_es", {"questions": [1, 2]})

    assert artifact.usage_count == 1
    stored = await store.get(ArtifactKind.QUIZ, "rom_12_1_2_es")
    assert stored.payload == {"questions": [1, 2]}
    assert stored.usage_count == 1


@pytest.mark.asyncio
async def test_upsert_existing_replaces_payload_and_keeps_created_at(store):
    await store.upsert(ArtifactKind.SYNTAX_ANALYSIS, "jhn_3_16_es", {"v": 1})
    first = await store.get(ArtifactKind.SYNTAX_ANALYSIS, "jhn_3_16_es")

    updated = await store.upsert(ArtifactKind.SYNTAX_ANALYSIS, "jhn_3_16_es", {"v": 2})
    second = await store.get(ArtifactKind.SYNTAX_ANALYSIS, "jhn_3_16_es")

    assert updated.usage_count == 2
    assert second.payload == {"v": 2}
    assert second.usage_count == 2
    assert second.created_at == first.created_at


@pytest.mark.asyncio
async def test_record_hit_increments_usage(store):
    await store.upsert(ArtifactKind.PASSAGE_TEXT, "psa_23_es", {"text": "Jehová es mi pastor"})

    await store.record_hit(ArtifactKind.PASSAGE_TEXT, "psa_23_es")
    await store.record_hit(ArtifactKind.PASSAGE_TEXT, "psa_23_es")

    stored = await store.get(ArtifactKind.PASSAGE_TEXT, "psa_23_es")
    assert stored.usage_count == 3


@pytest.mark.asyncio
async def test_kinds_are_separate_namespaces(store):
    await store.upsert(ArtifactKind.QUIZ, "psa_23_es", {"kind": "quiz"})

    assert await store.get(ArtifactKind.SYNTAX_ANALYSIS, "psa_23_es") is None
