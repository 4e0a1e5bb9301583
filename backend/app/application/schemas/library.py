"""Pydantic DTOs for library indexing and semantic search."""

from pydantic import BaseModel, Field


class ChunkingOptionsSchema(BaseModel):
    """Overrides for the chunker defaults."""

    target_size: int = Field(800, ge=50, le=8000)
    overlap: int = Field(100, ge=0, le=2000)
    min_size: int = Field(200, ge=1, le=8000)


class IndexResourceRequest(BaseModel):
    """Body for indexing one library resource."""

    title: str = Field(..., min_length=1, max_length=500, examples=["Rediscovering Expository Preaching"])
    author: str = Field("", max_length=255, examples=["John MacArthur"])
    user_id: str = Field(..., min_length=1)
    text_content: str = Field(..., examples=["[PAGE 1] Chapter 1: The Mandate..."])
    force: bool = Field(False, description="Delete stored chunks and re-index")
    options: ChunkingOptionsSchema | None = None


class ChunkMetadataSchema(BaseModel):
    page: int | None = None
    section: str | None = None
    start_char: int | None = None
    end_char: int | None = None


class ChunkSchema(BaseModel):
    """A stored chunk, without its embedding vector."""

    id: str
    resource_id: str
    resource_title: str
    resource_author: str
    chunk_index: int
    text: str
    has_embedding: bool
    metadata: ChunkMetadataSchema
    citation: str


class IndexResourceResponse(BaseModel):
    resource_id: str
    chunk_count: int
    chunks: list[ChunkSchema] = Field(default_factory=list)


class IndexStatusResponse(BaseModel):
    resource_id: str
    indexed: bool


class DeleteIndexResponse(BaseModel):
    resource_id: str
    deleted: int


class SearchRequest(BaseModel):
    """Semantic search over a user's library."""

    query: str = Field(..., min_length=1, max_length=8000)
    user_id: str = Field(..., min_length=1)
    resource_ids: list[str] | None = Field(None, description="Restrict to these resources")
    top_k: int = Field(10, ge=1, le=100)


class SearchHitSchema(BaseModel):
    chunk: ChunkSchema
    score: float


class SearchResponse(BaseModel):
    query: str
    results: list[SearchHitSchema]
    total: int
