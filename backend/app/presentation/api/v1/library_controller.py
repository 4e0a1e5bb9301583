"""Library API controller — indexing and semantic search over a user's documents."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.application.schemas import (
    ChunkMetadataSchema,
    ChunkSchema,
    DeleteIndexResponse,
    IndexResourceRequest,
    IndexResourceResponse,
    IndexStatusResponse,
    SearchHitSchema,
    SearchRequest,
    SearchResponse,
)
from app.application.services import DocumentIndexingService
from app.application.services.text_chunker import ChunkingOptions
from app.domain.entities import DocumentChunk, LibraryResource
from app.domain.exceptions import EntityNotFoundError
from app.infrastructure.dependencies import (
    get_document_indexing_service,
    get_library_reader_service,
)

router = APIRouter(prefix="/library", tags=["library"])


# ── Helpers ──────────────────────────────────────────────────────────


def _to_chunk_schema(chunk: DocumentChunk) -> ChunkSchema:
    """Map a domain chunk to its response schema (embedding omitted)."""
    return ChunkSchema(
        id=chunk.id,
        resource_id=chunk.resource_id,
        resource_title=chunk.resource_title,
        resource_author=chunk.resource_author,
        chunk_index=chunk.chunk_index,
        text=chunk.text,
        has_embedding=chunk.is_indexed,
        metadata=ChunkMetadataSchema(
            page=chunk.metadata.page,
            section=chunk.metadata.section,
            start_char=chunk.metadata.start_char,
            end_char=chunk.metadata.end_char,
        ),
        citation=chunk.citation,
    )


# ── Endpoints ────────────────────────────────────────────────────────


@router.post("/resources/{resource_id}/index", response_model=IndexResourceResponse)
async def index_resource(
    resource_id: str,
    body: IndexResourceRequest,
    service: DocumentIndexingService = Depends(get_document_indexing_service),
):
    """Chunk, embed and store a resource (``force`` re-indexes from scratch)."""
    resource = LibraryResource(
        id=resource_id,
        title=body.title,
        author=body.author,
        user_id=body.user_id,
        text_content=body.text_content,
    )
    options = ChunkingOptions(**body.options.model_dump()) if body.options else None
    chunks = await service.index_resource(resource, options, force=body.force)
    return IndexResourceResponse(
        resource_id=resource_id,
        chunk_count=len(chunks),
        chunks=[_to_chunk_schema(c) for c in chunks],
    )


@router.get("/resources/{resource_id}/index", response_model=IndexStatusResponse)
async def get_index_status(
    resource_id: str,
    service: DocumentIndexingService = Depends(get_library_reader_service),
):
    """Whether the resource has any stored chunks."""
    return IndexStatusResponse(resource_id=resource_id, indexed=await service.has_index(resource_id))


@router.get("/resources/{resource_id}/chunks", response_model=list[ChunkSchema])
async def list_chunks(
    resource_id: str,
    service: DocumentIndexingService = Depends(get_library_reader_service),
):
    """Stored chunks of a resource in document order."""
    try:
        chunks = await service.get_chunks(resource_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return [_to_chunk_schema(c) for c in chunks]


@router.delete("/resources/{resource_id}/index", response_model=DeleteIndexResponse)
async def delete_index(
    resource_id: str,
    service: DocumentIndexingService = Depends(get_library_reader_service),
):
    """Remove every stored chunk of a resource."""
    deleted = await service.delete_index(resource_id)
    return DeleteIndexResponse(resource_id=resource_id, deleted=deleted)


@router.post("/search", response_model=SearchResponse)
async def search_library(
    body: SearchRequest,
    service: DocumentIndexingService = Depends(get_document_indexing_service),
):
    """Semantic search across the user's library or a subset of resources."""
    results = await service.search(
        query=body.query,
        user_id=body.user_id,
        resource_ids=body.resource_ids,
        top_k=body.top_k,
    )
    return SearchResponse(
        query=body.query,
        results=[SearchHitSchema(chunk=_to_chunk_schema(r.chunk), score=r.score) for r in results],
        total=len(results),
    )
