"""Retrieval endpoints: answers, search and namespace statistics."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ragcrawl.api.dependencies import get_container
from ragcrawl.api.models.requests import QueryBody, SearchBody
from ragcrawl.api.models.responses import ApiResponse, to_payload
from ragcrawl.services.container import ServiceContainer

router = APIRouter(prefix="/api/rag", tags=["rag"])


@router.post("/query", response_model=ApiResponse)
async def query_knowledge_base(
    body: QueryBody, container: ServiceContainer = Depends(get_container)
) -> ApiResponse:
    answer = await container.rag.answer(
        body.query,
        body.namespace or container.settings.default_namespace,
        top_k=body.top_k,
        metadata_filter=body.filter_,
    )
    data = to_payload(answer)
    if not body.include_metadata:
        data["sources"] = [
            {"id": source["id"], "score": source["score"]} for source in data["sources"]
        ]
    return ApiResponse(success=True, message="Query answered", data=data)


@router.post("/search", response_model=ApiResponse)
async def search_knowledge_base(
    body: SearchBody, container: ServiceContainer = Depends(get_container)
) -> ApiResponse:
    result = await container.rag.search(
        body.query,
        body.namespace or container.settings.default_namespace,
        top_k=body.top_k,
        metadata_filter=body.filter_,
    )
    return ApiResponse(
        success=True,
        message=f"Found {result.total_matches} matches",
        data=to_payload(result),
    )


@router.get("/namespaces", response_model=ApiResponse)
async def list_namespaces(
    container: ServiceContainer = Depends(get_container),
) -> ApiResponse:
    namespaces = await container.rag.list_namespaces()
    return ApiResponse(success=True, message="Namespaces", data=to_payload(namespaces))


@router.get("/stats/{namespace}", response_model=ApiResponse)
async def namespace_stats(
    namespace: str, container: ServiceContainer = Depends(get_container)
) -> ApiResponse:
    stats = await container.rag.namespace_stats(namespace)
    return ApiResponse(
        success=True, message="Namespace statistics", data=to_payload(stats)
    )


@router.get("/health", response_model=ApiResponse)
async def rag_health(
    container: ServiceContainer = Depends(get_container),
) -> ApiResponse | JSONResponse:
    """Check the retrieval providers; 503 when any of them is down."""
    report = await container.rag.check_health()
    if not report.healthy:
        payload = ApiResponse(
            success=False, message="RAG system is unhealthy", data=to_payload(report)
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=payload.model_dump(),
        )
    return ApiResponse(success=True, message="RAG system is healthy", data=to_payload(report))
