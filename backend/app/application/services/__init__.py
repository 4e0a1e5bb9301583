from .text_chunker import TextChunker
from .similarity_search_service import SimilaritySearchService
from .derived_artifact_cache import DerivedArtifactCache
from .document_indexing_service import DocumentIndexingService

__all__ = [
    "TextChunker",
    "SimilaritySearchService",
    "DerivedArtifactCache",
    "DocumentIndexingService",
]
