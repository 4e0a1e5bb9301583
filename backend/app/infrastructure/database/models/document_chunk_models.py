"""SQLAlchemy ORM model for document chunks with pgvector embeddings."""

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB

from pgvector.sqlalchemy import Vector

from app.config import get_settings
from app.infrastructure.database.base import Base

EMBEDDING_DIMENSIONS = get_settings().embedding_dimensions


class DocumentChunkModel(Base):
    """A fragment of a library resource, with an optional vector embedding.

    Chunks are written in bulk when a resource is indexed and deleted in bulk
    when it is removed or re-indexed. Similarity is computed in the
    application over an owner's chunks, so the embedding column carries no
    ANN index. SQLite (used in tests) stores vectors and metadata as JSON.
    """

    __tablename__ = "document_chunks"

    id = Column(String(120), primary_key=True)
    resource_id = Column(String(64), nullable=False, index=True)
    resource_title = Column(String(500), nullable=False, default="")
    resource_author = Column(String(255), nullable=False, default="")
    user_id = Column(String(128), nullable=False, index=True)
    chunk_index = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    embedding = Column(
        Vector(EMBEDDING_DIMENSIONS).with_variant(JSON(none_as_null=True), "sqlite"),
        nullable=True,
    )
    metadata_ = Column(
        "metadata",
        JSONB().with_variant(JSON(), "sqlite"),
        nullable=False,
        default=dict,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("resource_id", "chunk_index", name="uq_chunk_position"),
    )
