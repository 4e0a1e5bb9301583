"""Document indexing service — orchestrates chunking, embedding, storage and retrieval.

Indexing path:  text → TextChunker → EmbeddingProvider → ChunkRepository
Retrieval path: query → EmbeddingProvider → SimilaritySearchService → ChunkRepository

Indexing is not transactional. If it fails midway the resource is left
with fewer chunks than intended; ``index_resource(..., force=True)``
deletes whatever was stored and starts over.
"""

import hashlib
import logging
import math
import time

from app.application.interfaces.cache_service import CacheService
from app.application.interfaces.chunk_repository import ChunkRepository, ProgressCallback
from app.application.interfaces.embedding_provider import EmbeddingProvider
from app.application.services.similarity_search_service import SimilaritySearchService
from app.application.services.text_chunker import ChunkingOptions, TextChunk, TextChunker
from app.domain.entities.document_chunk import ChunkMetadata, ChunkSearchResult, DocumentChunk
from app.domain.entities.library_resource import LibraryResource
from app.domain.entities.search_scope import scope_for
from app.domain.exceptions import ConfigurationError, EntityNotFoundError
from app.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("DocumentIndexingService")

_SEARCH_CACHE_PREFIX = "rag:search:"
_DEFAULT_SEARCH_CACHE_TTL = 300  # seconds
_EMBED_PROGRESS_BATCH = 50  # chunks per embed_batch call, for progress reporting


class DocumentIndexingService:
    """Application service for indexing library resources and searching them.

    Built without an embedding provider, it still serves the maintenance
    operations (`has_index`, `get_chunks`, `delete_index`); indexing and
    search then raise `ConfigurationError`.
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider | None,
        chunk_repository: ChunkRepository,
        search_service: SimilaritySearchService,
        *,
        chunker: TextChunker | None = None,
        cache_service: CacheService | None = None,
        search_cache_ttl: int = _DEFAULT_SEARCH_CACHE_TTL,
    ):
        self._embedding_provider = embedding_provider
        self._chunk_repo = chunk_repository
        self._search_service = search_service
        self._chunker = chunker or TextChunker()
        self._cache = cache_service
        self._search_cache_ttl = search_cache_ttl

    # ── Indexing ─────────────────────────────────────────────────────

    async def index_resource(
        self,
        resource: LibraryResource,
        options: ChunkingOptions | None = None,
        *,
        force: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> list[DocumentChunk]:
        """Chunk, embed and store a resource.

        An already-indexed resource is left alone (its stored chunks are
        returned) unless ``force`` is set, in which case every stored chunk
        is deleted before the new ones are written.
        Forcing requires an embedding provider; without one nothing is deleted.

        Returns:
            The resource's chunks after indexing.
        """

        def report(progress: int, stage: str) -> None:
            logger.debug("Indexing %s: %d%% %s", resource.id, progress, stage)
            if on_progress is not None:
                on_progress(progress, stage)

        report(0, "Starting")

        if force:
            self._require_embedder()
            deleted = await self._chunk_repo.delete_by_resource(resource.id)
            if deleted:
                plog.detail(f"Re-index: removed {deleted} stale chunks", resource=resource.id)
        elif await self._chunk_repo.has_any(resource.id):
            logger.info("Resource %s already indexed, skipping", resource.id)
            report(100, "Already indexed")
            return await self._chunk_repo.find_by_resource(resource.id)

        if not resource.text_content or not resource.text_content.strip():
            logger.warning("Resource %s has no text content to index", resource.id)
            report(100, "No text content")
            return []

        start = time.monotonic()
        plog.separator(resource.title[:40])

        # 1. Chunk
        report(5, "Splitting text into chunks")
        pieces = self._chunker.split(resource.text_content, options)
        plog.step_complete(PipelineStage.CHUNK, f"{len(pieces)} chunks", resource=resource.id)
        if not pieces:
            report(100, "No chunks produced")
            return []

        # 2. Embed
        with plog.timed_step(PipelineStage.EMBED, f"Embedding {len(pieces)} chunks"):
            embeddings = await self._embed_with_progress([p.text for p in pieces], report)

        # 3. Store
        report(38, "Preparing chunks")
        chunks = [
            self._to_chunk(resource, index, piece, embedding)
            for index, (piece, embedding) in enumerate(zip(pieces, embeddings, strict=True))
        ]

        def store_progress(progress: int, stage: str) -> None:
            report(40 + round(progress * 0.59), stage)

        with plog.timed_step(PipelineStage.STORE, f"Storing {len(chunks)} chunks"):
            await self._chunk_repo.put_many(chunks, on_progress=store_progress)

        await self._invalidate_search_cache()

        duration_ms = int((time.monotonic() - start) * 1000)
        plog.stats(resource=resource.id, chunks=len(chunks), duration_ms=duration_ms)
        report(100, "Indexing complete")
        return chunks

    async def index_resources(self, resources: list[LibraryResource]) -> int:
        """Index several resources; one failing resource does not stop the others.

        Returns:
            Total number of chunks across the successfully indexed resources.
        """
        total = 0
        for resource in resources:
            try:
                chunks = await self.index_resource(resource)
            except Exception as exc:
                plog.step_error(PipelineStage.ERROR, f"Indexing failed for {resource.id}", error=exc)
                continue
            total += len(chunks)
        return total

    async def delete_index(self, resource_id: str) -> int:
        deleted = await self._chunk_repo.delete_by_resource(resource_id)
        await self._invalidate_search_cache()
        return deleted

    async def has_index(self, resource_id: str) -> bool:
        return await self._chunk_repo.has_any(resource_id)

    async def get_chunks(self, resource_id: str) -> list[DocumentChunk]:
        """Stored chunks in document order; raises EntityNotFoundError when not indexed."""
        chunks = await self._chunk_repo.find_by_resource(resource_id)
        if not chunks:
            raise EntityNotFoundError("Index", resource_id)
        return chunks

    # ── Retrieval ────────────────────────────────────────────────────

    async def search(
        self,
        query: str,
        user_id: str,
        resource_ids: list[str] | None = None,
        top_k: int = 10,
    ) -> list[ChunkSearchResult]:
        """Embed ``query`` and return the owner's most similar chunks."""
        cache_key = self._search_cache_key(query, user_id, resource_ids, top_k)
        if self._cache is not None:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                logger.debug("Search results served from cache")
                return cached

        query_embedding = await self._require_embedder().embed(query)
        results = await self._search_service.search(
            query_embedding,
            top_k,
            scope_for(user_id, resource_ids),
        )

        if results:
            plog.step_complete(
                PipelineStage.SEARCH,
                f"{len(results)} relevant chunks",
                top=f"{results[0].score:.3f}",
            )
        else:
            logger.info("No chunks above %.2f for user %s", self._search_service.min_score, user_id)

        if self._cache is not None:
            await self._cache.set(cache_key, results, self._search_cache_ttl)
        return results

    # ── Helpers ──────────────────────────────────────────────────────

    def _require_embedder(self) -> EmbeddingProvider:
        if self._embedding_provider is None:
            raise ConfigurationError("No embedding provider configured")
        return self._embedding_provider

    async def _embed_with_progress(
        self,
        texts: list[str],
        report: ProgressCallback,
    ) -> list[list[float]]:
        embeddings: list[list[float]] = []
        total_batches = math.ceil(len(texts) / _EMBED_PROGRESS_BATCH)
        for batch_num, offset in enumerate(range(0, len(texts), _EMBED_PROGRESS_BATCH), start=1):
            batch = texts[offset : offset + _EMBED_PROGRESS_BATCH]
            embeddings.extend(await self._require_embedder().embed_batch(batch))
            done = min(offset + _EMBED_PROGRESS_BATCH, len(texts))
            report(5 + round(batch_num / total_batches * 30), f"Embeddings: {done}/{len(texts)}")
        return embeddings

    @staticmethod
    def _to_chunk(
        resource: LibraryResource,
        index: int,
        piece: TextChunk,
        embedding: list[float],
    ) -> DocumentChunk:
        return DocumentChunk(
            id=DocumentChunk.make_id(resource.id, index),
            resource_id=resource.id,
            resource_title=resource.title,
            resource_author=resource.display_author,
            user_id=resource.user_id,
            chunk_index=index,
            text=piece.text,
            embedding=embedding,
            metadata=ChunkMetadata(
                page=piece.page,
                section=piece.section,
                start_char=piece.start_char,
                end_char=piece.end_char,
            ),
        )

    @staticmethod
    def _search_cache_key(
        query: str,
        user_id: str,
        resource_ids: list[str] | None,
        top_k: int,
    ) -> str:
        resource_key = ",".join(sorted(resource_ids)) if resource_ids else "all"
        digest = hashlib.sha256(f"{query}:{user_id}:{resource_key}:{top_k}".encode()).hexdigest()[:16]
        return f"{_SEARCH_CACHE_PREFIX}{digest}"

    async def _invalidate_search_cache(self) -> None:
        if self._cache is not None:
            await self._cache.delete_by_prefix(_SEARCH_CACHE_PREFIX)
