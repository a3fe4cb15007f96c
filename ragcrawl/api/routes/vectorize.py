"""Vectorize endpoints: crawl a site into the vector index."""

from fastapi import APIRouter, Depends

from ragcrawl.api.dependencies import get_container
from ragcrawl.api.models.requests import DryRunBody, VectorizeBody
from ragcrawl.api.models.responses import ApiResponse, to_payload
from ragcrawl.api.routes.crawl import to_crawl_request
from ragcrawl.services.container import ServiceContainer
from ragcrawl.services.models import VectorizeRequest

router = APIRouter(prefix="/api/vectorize", tags=["vectorize"])


def to_vectorize_request(body: VectorizeBody, container: ServiceContainer) -> VectorizeRequest:
    """Build a VectorizeRequest, taking unset chunk windows from settings."""
    settings = container.settings
    return VectorizeRequest(
        crawl=to_crawl_request(body, container),
        index_name=body.index_name,
        namespace=body.namespace or settings.default_namespace,
        chunk_size=body.chunk_size if body.chunk_size is not None else settings.chunk_size,
        chunk_overlap=(
            body.chunk_overlap if body.chunk_overlap is not None else settings.chunk_overlap
        ),
    )


@router.post("", response_model=ApiResponse)
async def vectorize_site(
    body: VectorizeBody, container: ServiceContainer = Depends(get_container)
) -> ApiResponse:
    result = await container.ingestion.vectorize(to_vectorize_request(body, container))
    return ApiResponse(
        success=True,
        message=f"Stored {result.vectors_stored} vectors in {result.index_name}",
        data=to_payload(result),
    )


@router.post("/preview", response_model=ApiResponse)
async def preview_vectorize(
    body: VectorizeBody, container: ServiceContainer = Depends(get_container)
) -> ApiResponse:
    """Crawl and chunk without embedding, estimating vectors and tokens."""
    preview = await container.ingestion.preview_vectorize(
        to_vectorize_request(body, container)
    )
    return ApiResponse(
        success=True,
        message=f"Would store {preview.estimated_vectors} vectors in {preview.index_name}",
        data=to_payload(preview),
    )


@router.post("/test", response_model=ApiResponse)
async def dry_run_vectorize(
    body: DryRunBody, container: ServiceContainer = Depends(get_container)
) -> ApiResponse:
    """Chunk a single page and report a sample, storing nothing."""
    result = await container.ingestion.dry_run(
        container.crawl_request(body.url),
        chunk_size=body.chunk_size,
        chunk_overlap=body.chunk_overlap,
    )
    return ApiResponse(
        success=True,
        message="Vector processing test completed",
        data=to_payload(result),
    )


@router.get("/stats/{index_name}", response_model=ApiResponse)
async def index_stats(
    index_name: str, container: ServiceContainer = Depends(get_container)
) -> ApiResponse:
    stats = await container.rag.index_stats(index_name)
    return ApiResponse(success=True, message="Index statistics", data=to_payload(stats))
