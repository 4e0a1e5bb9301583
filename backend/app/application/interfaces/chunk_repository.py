"""Abstract repository interface (port) for document chunks."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from app.domain.entities.document_chunk import DocumentChunk

ProgressCallback = Callable[[int, str], None]


class ChunkRepository(ABC):
    """Port for document chunk persistence.

    Re-indexing a resource is always ``delete_by_resource`` followed by
    ``put_many`` — chunks are never patched in place.
    """

    @abstractmethod
    async def put(self, chunk: DocumentChunk) -> None:
        """Upsert a single chunk by id."""
        ...

    @abstractmethod
    async def put_many(
        self,
        chunks: list[DocumentChunk],
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Upsert chunks in size-bounded batches, committed serially.

        Each batch is atomic; there is no atomicity across batches. A failing
        batch stops the call and leaves earlier batches committed.

        Args:
            chunks: The chunks to store.
            on_progress: Optional callback receiving ``(percent, stage)``
                after every committed batch.
        """
        ...

    @abstractmethod
    async def find_by_resource(self, resource_id: str) -> list[DocumentChunk]:
        """All chunks of a resource, ordered by chunk_index ascending."""
        ...

    @abstractmethod
    async def find_by_owner(self, user_id: str) -> list[DocumentChunk]:
        """All chunks owned by a user."""
        ...

    @abstractmethod
    async def find_by_resources(
        self,
        resource_ids: list[str],
        *,
        user_id: str | None = None,
    ) -> list[DocumentChunk]:
        """Chunks of several resources, optionally restricted to one owner.

        The id list is split into sub-queries no larger than the store's
        "any of" limit; results are unioned without duplicates.
        """
        ...

    @abstractmethod
    async def delete_by_resource(self, resource_id: str) -> int:
        """Delete all chunks for a resource in batches. Returns count of deleted rows."""
        ...

    @abstractmethod
    async def has_any(self, resource_id: str) -> bool:
        """Whether the resource has at least one stored chunk (limit-1 query)."""
        ...
