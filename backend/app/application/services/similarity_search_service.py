"""Similarity search — ranks an owner's stored chunks against a query vector.

This is a brute-force scan: every candidate chunk is scored with cosine
similarity in Python. Per-owner chunk counts stay in the low thousands,
so no approximate index is involved.
"""

import logging

from app.application.interfaces.chunk_repository import ChunkRepository
from app.domain.entities.document_chunk import (
    ChunkSearchResult,
    DocumentChunk,
    cosine_similarity,
)
from app.domain.entities.search_scope import AllForOwner, SearchScope, SubsetOfResources

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 0.5


class SimilaritySearchService:
    """Application service for scoped cosine-similarity retrieval."""

    def __init__(self, chunk_repository: ChunkRepository, *, min_score: float = DEFAULT_MIN_SCORE):
        self._chunk_repo = chunk_repository
        self._min_score = min_score

    @property
    def min_score(self) -> float:
        return self._min_score

    async def search(
        self,
        query_embedding: list[float],
        top_k: int,
        scope: SearchScope,
        *,
        min_score: float | None = None,
    ) -> list[ChunkSearchResult]:
        """Return up to ``top_k`` chunks scoring at least the relevance floor.

        Args:
            query_embedding: The query vector.
            top_k: Maximum number of results.
            scope: Which chunks to consider.
            min_score: Overrides the service's relevance floor for this call.

        Returns:
            Results ordered by descending score; equal scores keep the order
            in which the store returned the chunks.
        """
        candidates = await self._load_candidates(scope)
        floor = self._min_score if min_score is None else min_score
        results = rank_chunks(candidates, query_embedding, top_k=top_k, min_score=floor)

        logger.debug(
            "Scored %d candidate chunks, %d above %.2f (top_k=%d)",
            len(candidates),
            len(results),
            floor,
            top_k,
        )
        return results

    async def _load_candidates(self, scope: SearchScope) -> list[DocumentChunk]:
        if isinstance(scope, SubsetOfResources):
            return await self._chunk_repo.find_by_resources(
                list(scope.resource_ids), user_id=scope.owner_id
            )
        if isinstance(scope, AllForOwner):
            return await self._chunk_repo.find_by_owner(scope.owner_id)
        raise TypeError(f"Unsupported search scope: {type(scope).__name__}")


def rank_chunks(
    chunks: list[DocumentChunk],
    query_embedding: list[float],
    *,
    top_k: int,
    min_score: float,
) -> list[ChunkSearchResult]:
    """Score, filter by ``min_score`` and sort chunks; unindexed chunks are skipped."""
    scored = [
        ChunkSearchResult(chunk=chunk, score=cosine_similarity(query_embedding, chunk.embedding))
        for chunk in chunks
        if chunk.embedding
    ]
    relevant = [r for r in scored if r.score >= min_score]
    relevant.sort(key=lambda r: r.score, reverse=True)
    return relevant[: max(top_k, 0)]
