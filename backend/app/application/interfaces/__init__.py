from .embedding_provider import EmbeddingProvider
from .chunk_repository import ChunkRepository, ProgressCallback
from .artifact_store import ArtifactStore
from .cache_service import CacheService

__all__ = [
    "EmbeddingProvider",
    "ChunkRepository",
    "ProgressCallback",
    "ArtifactStore",
    "CacheService",
]
