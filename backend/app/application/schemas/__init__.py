from .library import (
    ChunkingOptionsSchema,
    ChunkMetadataSchema,
    ChunkSchema,
    DeleteIndexResponse,
    IndexResourceRequest,
    IndexResourceResponse,
    IndexStatusResponse,
    SearchHitSchema,
    SearchRequest,
    SearchResponse,
)
from .artifacts import ArtifactPutRequest, ArtifactResponse

__all__ = [
    "ChunkingOptionsSchema",
    "ChunkMetadataSchema",
    "ChunkSchema",
    "DeleteIndexResponse",
    "IndexResourceRequest",
    "IndexResourceResponse",
    "IndexStatusResponse",
    "SearchHitSchema",
    "SearchRequest",
    "SearchResponse",
    "ArtifactPutRequest",
    "ArtifactResponse",
]
