"""SQLAlchemy implementation of ArtifactStore."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.interfaces.artifact_store import ArtifactStore
from app.domain.entities.derived_artifact import ArtifactKind, CachedArtifact
from app.infrastructure.database.models.derived_artifact_models import DerivedArtifactModel


class SQLAlchemyArtifactStore(ArtifactStore):
    """Derived artifacts in a single ``derived_artifacts`` table keyed by (kind, key)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, kind: ArtifactKind, key: str) -> CachedArtifact | None:
        async with self._session_factory() as session:
            model = await session.get(DerivedArtifactModel, (kind.value, key))
            return self._to_domain(model) if model else None

    async def record_hit(self, kind: ArtifactKind, key: str) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(
                    update(DerivedArtifactModel)
                    .where(
                        DerivedArtifactModel.kind == kind.value,
                        DerivedArtifactModel.cache_key == key,
                    )
                    .values(
                        usage_count=DerivedArtifactModel.usage_count + 1,
                        last_used_at=datetime.now(timezone.utc),
                    )
                )

    async def upsert(self, kind: ArtifactKind, key: str, payload: dict[str, Any]) -> CachedArtifact:
        now = datetime.now(timezone.utc)
        async with self._session_factory() as session:
            async with session.begin():
                model = await session.get(DerivedArtifactModel, (kind.value, key))
                if model is None:
                    model = DerivedArtifactModel(
                        kind=kind.value,
                        cache_key=key,
                        payload=payload,
                        usage_count=1,
                        created_at=now,
                        last_used_at=now,
                    )
                    session.add(model)
                else:
                    model.payload = payload
                    model.usage_count = (model.usage_count or 0) + 1
                    model.last_used_at = now
            return self._to_domain(model)

    @staticmethod
    def _to_domain(model: DerivedArtifactModel) -> CachedArtifact:
        return CachedArtifact(
            key=model.cache_key,
            payload=dict(model.payload or {}),
            usage_count=model.usage_count,
            created_at=model.created_at,
            last_used_at=model.last_used_at,
        )
