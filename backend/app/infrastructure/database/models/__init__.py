from .document_chunk_models import DocumentChunkModel
from .derived_artifact_models import DerivedArtifactModel

__all__ = [
    "DocumentChunkModel",
    "DerivedArtifactModel",
]
