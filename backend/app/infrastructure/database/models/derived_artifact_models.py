"""SQLAlchemy ORM model for cached derived artifacts."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB

from app.infrastructure.database.base import Base


class DerivedArtifactModel(Base):
    """An AI-computed result cached by kind + canonical reference key.

    Rows are never expired; ``usage_count`` and ``last_used_at`` are bumped
    on every cache hit.
    """

    __tablename__ = "derived_artifacts"

    kind = Column(String(40), primary_key=True)
    cache_key = Column(String(255), primary_key=True)
    payload = Column(JSONB().with_variant(JSON(), "sqlite"), nullable=False)
    usage_count = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    last_used_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
