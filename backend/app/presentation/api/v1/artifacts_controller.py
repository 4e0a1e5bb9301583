"""Derived-artifact cache API — read and write cached passage renderings, analyses and quizzes."""

from collections.abc import Callable

from fastapi import APIRouter, Depends, Query

from app.application.schemas import ArtifactPutRequest, ArtifactResponse
from app.application.services import DerivedArtifactCache
from app.domain.entities import ArtifactKind, CacheOutcome
from app.infrastructure.dependencies import get_artifact_cache_factory

router = APIRouter(prefix="/cache", tags=["cache"])


def _to_response(outcome: CacheOutcome) -> ArtifactResponse:
    artifact = outcome.artifact
    return ArtifactResponse(
        key=outcome.key,
        hit=outcome.hit,
        source=outcome.source.value if outcome.source else None,
        payload=artifact.payload if artifact else None,
        usage_count=artifact.usage_count if artifact else None,
        created_at=artifact.created_at if artifact else None,
        last_used_at=artifact.last_used_at if artifact else None,
        error=str(outcome.error) if outcome.error else None,
    )


@router.get("/{kind}", response_model=ArtifactResponse)
async def get_artifact(
    kind: ArtifactKind,
    reference: str = Query(..., min_length=1),
    language: str = Query("Spanish", min_length=2),
    cache_for: Callable[[ArtifactKind], DerivedArtifactCache] = Depends(get_artifact_cache_factory),
):
    """Look up a cached artifact; a miss is reported as ``hit: false``, not 404."""
    outcome = await cache_for(kind).get(reference, language)
    return _to_response(outcome)


@router.put("/{kind}", response_model=ArtifactResponse)
async def put_artifact(
    kind: ArtifactKind,
    body: ArtifactPutRequest,
    cache_for: Callable[[ArtifactKind], DerivedArtifactCache] = Depends(get_artifact_cache_factory),
):
    """Store a computed artifact under its language-scoped key."""
    outcome = await cache_for(kind).put(body.reference, body.language, body.payload)
    return _to_response(outcome)
