"""SQLAlchemy implementation of ChunkRepository — batched writes, sub-batched lookups."""

import asyncio
import logging
import math
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.interfaces.chunk_repository import ChunkRepository, ProgressCallback
from app.domain.entities.document_chunk import ChunkMetadata, DocumentChunk
from app.infrastructure.database.models.document_chunk_models import DocumentChunkModel

logger = logging.getLogger(__name__)

# ── Batching constants ──────────────────────────────────────────────
_DEFAULT_WRITE_BATCH_SIZE = 50  # embeddings make each row large
_DEFAULT_WRITE_PAUSE_MS = 100
_DEFAULT_IN_QUERY_LIMIT = 30  # max values in one "IN (...)" filter


class SQLAlchemyChunkRepository(ChunkRepository):
    """Concrete chunk repository backed by PostgreSQL (pgvector) or SQLite.

    Writes open one transaction per batch; a crash mid-run leaves earlier
    batches committed, and re-indexing (delete, then recreate) is the
    recovery path.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        write_batch_size: int = _DEFAULT_WRITE_BATCH_SIZE,
        write_pause_ms: int = _DEFAULT_WRITE_PAUSE_MS,
        in_query_limit: int = _DEFAULT_IN_QUERY_LIMIT,
    ):
        self._session_factory = session_factory
        self._write_batch_size = write_batch_size
        self._write_pause = write_pause_ms / 1000
        self._in_query_limit = in_query_limit

    # ── Writes ───────────────────────────────────────────────────────

    async def put(self, chunk: DocumentChunk) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await session.merge(self._to_model(chunk))

    async def put_many(
        self,
        chunks: list[DocumentChunk],
        on_progress: ProgressCallback | None = None,
    ) -> None:
        if not chunks:
            return

        total = len(chunks)
        total_batches = math.ceil(total / self._write_batch_size)
        logger.info("Upserting %d chunks in %d batches", total, total_batches)

        for batch_num, offset in enumerate(range(0, total, self._write_batch_size), start=1):
            batch = chunks[offset : offset + self._write_batch_size]

            async with self._session_factory() as session:
                async with session.begin():
                    for chunk in batch:
                        await session.merge(self._to_model(chunk))

            logger.debug("Batch %d/%d committed (%d chunks)", batch_num, total_batches, len(batch))

            if on_progress is not None:
                saved = min(offset + self._write_batch_size, total)
                on_progress(round(batch_num / total_batches * 100), f"Saved {saved}/{total}")

            if offset + self._write_batch_size < total:
                await asyncio.sleep(self._write_pause)

        logger.info("Stored %d chunks for resource %s", total, chunks[0].resource_id)

    async def delete_by_resource(self, resource_id: str) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(DocumentChunkModel.id).where(DocumentChunkModel.resource_id == resource_id)
            )
            ids = list(result.scalars().all())

        if not ids:
            return 0

        for offset in range(0, len(ids), self._write_batch_size):
            batch_ids = ids[offset : offset + self._write_batch_size]
            async with self._session_factory() as session:
                async with session.begin():
                    await session.execute(
                        delete(DocumentChunkModel).where(DocumentChunkModel.id.in_(batch_ids))
                    )

            if offset + self._write_batch_size < len(ids):
                await asyncio.sleep(self._write_pause)

        logger.info("Deleted %d chunks for resource %s", len(ids), resource_id)
        return len(ids)

    # ── Reads ────────────────────────────────────────────────────────

    async def find_by_resource(self, resource_id: str) -> list[DocumentChunk]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(DocumentChunkModel).where(DocumentChunkModel.resource_id == resource_id)
            )
            models = result.scalars().all()
        # Ordering is applied here, never assumed from write order.
        return sorted((self._to_domain(m) for m in models), key=lambda c: c.chunk_index)

    async def find_by_owner(self, user_id: str) -> list[DocumentChunk]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(DocumentChunkModel).where(DocumentChunkModel.user_id == user_id)
            )
            return [self._to_domain(m) for m in result.scalars().all()]

    async def find_by_resources(
        self,
        resource_ids: list[str],
        *,
        user_id: str | None = None,
    ) -> list[DocumentChunk]:
        unique_ids = list(dict.fromkeys(resource_ids))
        if not unique_ids:
            return []

        found: dict[str, DocumentChunk] = {}
        async with self._session_factory() as session:
            for offset in range(0, len(unique_ids), self._in_query_limit):
                batch_ids = unique_ids[offset : offset + self._in_query_limit]
                query = select(DocumentChunkModel).where(
                    DocumentChunkModel.resource_id.in_(batch_ids)
                )
                if user_id is not None:
                    query = query.where(DocumentChunkModel.user_id == user_id)

                result = await session.execute(query)
                for model in result.scalars().all():
                    found.setdefault(model.id, self._to_domain(model))

        return list(found.values())

    async def has_any(self, resource_id: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                select(DocumentChunkModel.id)
                .where(DocumentChunkModel.resource_id == resource_id)
                .limit(1)
            )
            return result.scalar_one_or_none() is not None

    # ── Mapping ──────────────────────────────────────────────────────

    @staticmethod
    def _to_model(chunk: DocumentChunk) -> DocumentChunkModel:
        return DocumentChunkModel(
            id=chunk.id,
            resource_id=chunk.resource_id,
            resource_title=chunk.resource_title,
            resource_author=chunk.resource_author,
            user_id=chunk.user_id,
            chunk_index=chunk.chunk_index,
            text=chunk.text,
            embedding=list(chunk.embedding) if chunk.embedding else None,
            metadata_=chunk.metadata.to_dict(),
            created_at=chunk.created_at,
        )

    @staticmethod
    def _to_domain(model: DocumentChunkModel) -> DocumentChunk:
        return DocumentChunk(
            id=model.id,
            resource_id=model.resource_id,
            resource_title=model.resource_title or "",
            resource_author=model.resource_author or "",
            user_id=model.user_id,
            chunk_index=model.chunk_index,
            text=model.text,
            embedding=_vector_to_list(model.embedding),
            metadata=ChunkMetadata.from_dict(model.metadata_),
            created_at=model.created_at,
        )


def _vector_to_list(value: Any) -> list[float] | None:
    """pgvector yields numpy arrays, SQLite yields JSON lists."""
    if value is None:
        return None
    return [float(v) for v in value]
