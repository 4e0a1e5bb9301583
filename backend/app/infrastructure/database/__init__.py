from .base import Base
from .session import engine, async_session_factory, get_session_factory
from .models import DocumentChunkModel, DerivedArtifactModel

__all__ = [
    "Base",
    "engine",
    "async_session_factory",
    "get_session_factory",
    "DocumentChunkModel",
    "DerivedArtifactModel",
]
