"""Abstract interface (port) for the key-value store behind the derived-artifact cache."""

from abc import ABC, abstractmethod
from typing import Any

from app.domain.entities.derived_artifact import ArtifactKind, CachedArtifact


class ArtifactStore(ABC):
    """Port for persisting derived artifacts, addressed by kind + key."""

    @abstractmethod
    async def get(self, kind: ArtifactKind, key: str) -> CachedArtifact | None:
        """Return the stored artifact, or None when absent."""
        ...

    @abstractmethod
    async def record_hit(self, kind: ArtifactKind, key: str) -> None:
        """Increment the usage count and bump last-used time."""
        ...

    @abstractmethod
    async def upsert(self, kind: ArtifactKind, key: str, payload: dict[str, Any]) -> CachedArtifact:
        """Write the payload under ``key``.

        An existing entry keeps its creation time and gets its usage count
        incremented; a new entry starts at 1.
        """
        ...
