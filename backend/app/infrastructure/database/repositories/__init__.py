from .chunk_repository import SQLAlchemyChunkRepository
from .artifact_store import SQLAlchemyArtifactStore

__all__ = [
    "SQLAlchemyChunkRepository",
    "SQLAlchemyArtifactStore",
]
