"""Domain entity for document chunks — citeable text fragments with vector embeddings."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class ChunkMetadata:
    """Location of a fragment inside its source document."""

    page: int | None = None
    section: str | None = None
    start_char: int | None = None
    end_char: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the stored key names, omitting unset values."""
        data: dict[str, Any] = {}
        if self.page is not None:
            data["page"] = self.page
        if self.section is not None:
            data["section"] = self.section
        if self.start_char is not None:
            data["startChar"] = self.start_char
        if self.end_char is not None:
            data["endChar"] = self.end_char
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ChunkMetadata":
        data = data or {}
        return cls(
            page=data.get("page"),
            section=data.get("section"),
            start_char=data.get("startChar"),
            end_char=data.get("endChar"),
        )


@dataclass
class DocumentChunk:
    """A fragment of a library resource, the unit of indexing and retrieval.

    Title and author are denormalized from the owning resource so a search
    hit can be cited without another lookup. A chunk with no embedding is
    "unindexed" and never takes part in similarity search.
    """

    id: str
    resource_id: str
    resource_title: str
    resource_author: str
    user_id: str
    chunk_index: int
    text: str
    embedding: list[float] | None = None
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def make_id(resource_id: str, chunk_index: int) -> str:
        """Deterministic id, so re-upserting the same fragment overwrites it."""
        return f"{resource_id}_chunk_{chunk_index}"

    @property
    def is_indexed(self) -> bool:
        return bool(self.embedding)

    @property
    def citation(self) -> str:
        """Human-readable source line, e.g. ``Stott, "The Cross" - Chapter 2, p. 14``."""
        section_info = f" - {self.metadata.section}" if self.metadata.section else ""
        page_info = f", p. {self.metadata.page}" if self.metadata.page else ""
        return f'{self.resource_author}, "{self.resource_title}"{section_info}{page_info}'


@dataclass
class ChunkSearchResult:
    """A chunk paired with its cosine similarity to the query. Never persisted."""

    chunk: DocumentChunk
    score: float


def cosine_similarity(a: list[float] | None, b: list[float] | None) -> float:
    """Cosine similarity in [-1, 1].

    Missing vectors, mismatched lengths and zero-magnitude vectors score 0.
    """
    if not a or not b or len(a) != len(b):
        return 0.0

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    magnitude = math.sqrt(norm_a) * math.sqrt(norm_b)
    return 0.0 if magnitude == 0 else dot / magnitude
