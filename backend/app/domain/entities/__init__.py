from .document_chunk import ChunkMetadata, ChunkSearchResult, DocumentChunk, cosine_similarity
from .library_resource import LibraryResource
from .search_scope import AllForOwner, SearchScope, SubsetOfResources, scope_for
from .derived_artifact import ArtifactKind, CachedArtifact, CacheOutcome, CacheSource

__all__ = [
    "ChunkMetadata",
    "ChunkSearchResult",
    "DocumentChunk",
    "cosine_similarity",
    "LibraryResource",
    "AllForOwner",
    "SearchScope",
    "SubsetOfResources",
    "scope_for",
    "ArtifactKind",
    "CachedArtifact",
    "CacheOutcome",
    "CacheSource",
]
