"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import get_settings
from app.application.interfaces.embedding_provider import EmbeddingProvider
from app.application.services import (
    DerivedArtifactCache,
    DocumentIndexingService,
    SimilaritySearchService,
    TextChunker,
)
from app.application.services.text_chunker import ChunkingOptions
from app.domain.entities.derived_artifact import ArtifactKind
from app.domain.exceptions import ConfigurationError
from app.infrastructure.cache import MemoryCacheService
from app.infrastructure.database.repositories import (
    SQLAlchemyArtifactStore,
    SQLAlchemyChunkRepository,
)
from app.infrastructure.database.session import get_session_factory
from app.infrastructure.openrouter import OpenRouterEmbeddingProvider


@lru_cache
def get_search_cache() -> MemoryCacheService:
    """Process-wide memo of recent search results."""
    return MemoryCacheService(default_ttl_seconds=get_settings().search_cache_ttl_seconds)


def get_embedding_provider() -> EmbeddingProvider:
    """Provides the OpenRouter embedding adapter; 503 when it is not configured."""
    settings = get_settings()
    try:
        return OpenRouterEmbeddingProvider(
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            app_name=settings.openrouter_app_name,
            model=settings.embedding_model,
            model_dimensions=settings.embedding_dimensions,
            max_chars=settings.embedding_max_chars,
            batch_size=settings.embedding_batch_size,
            batch_pause_ms=settings.embedding_batch_pause_ms,
        )
    except ConfigurationError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


def get_chunk_repository(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> SQLAlchemyChunkRepository:
    settings = get_settings()
    return SQLAlchemyChunkRepository(
        session_factory,
        write_batch_size=settings.chunk_write_batch_size,
        write_pause_ms=settings.chunk_write_pause_ms,
        in_query_limit=settings.chunk_in_query_limit,
    )


def _build_indexing_service(
    chunk_repository: SQLAlchemyChunkRepository,
    embedding_provider: EmbeddingProvider | None,
) -> DocumentIndexingService:
    settings = get_settings()
    chunker = TextChunker(
        ChunkingOptions(
            target_size=settings.chunk_target_size,
            overlap=settings.chunk_overlap,
            min_size=settings.chunk_min_size,
        )
    )
    search_service = SimilaritySearchService(
        chunk_repository,
        min_score=settings.similarity_floor,
    )
    return DocumentIndexingService(
        embedding_provider=embedding_provider,
        chunk_repository=chunk_repository,
        search_service=search_service,
        chunker=chunker,
        cache_service=get_search_cache(),
        search_cache_ttl=settings.search_cache_ttl_seconds,
    )


async def get_document_indexing_service(
    chunk_repository: SQLAlchemyChunkRepository = Depends(get_chunk_repository),
    embedding_provider: EmbeddingProvider = Depends(get_embedding_provider),
) -> AsyncGenerator[DocumentIndexingService, None]:
    """Provides a DocumentIndexingService with chunker, embeddings, store and search wired up."""
    yield _build_indexing_service(chunk_repository, embedding_provider)


async def get_library_reader_service(
    chunk_repository: SQLAlchemyChunkRepository = Depends(get_chunk_repository),
) -> AsyncGenerator[DocumentIndexingService, None]:
    """Provides a DocumentIndexingService without embeddings.

    Index status, chunk listing and deletion only touch the chunk store,
    so they keep working when no OpenRouter key is configured.
    """
    yield _build_indexing_service(chunk_repository, None)


def get_artifact_cache_factory(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """Provides a callable building the DerivedArtifactCache for a given kind."""
    settings = get_settings()
    store = SQLAlchemyArtifactStore(session_factory)

    def build(kind: ArtifactKind) -> DerivedArtifactCache:
        return DerivedArtifactCache(store, kind, default_language=settings.default_language)

    return build
