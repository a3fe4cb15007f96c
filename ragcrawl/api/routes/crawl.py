"""Crawl endpoints."""

from fastapi import APIRouter, Depends

from ragcrawl.api.dependencies import get_container
from ragcrawl.api.models.requests import AnalyzeBody, CrawlBody
from ragcrawl.api.models.responses import ApiResponse, to_payload
from ragcrawl.crawler.models import CrawlRequest
from ragcrawl.services.container import ServiceContainer

router = APIRouter(prefix="/api/crawl", tags=["crawl"])


def to_crawl_request(body: CrawlBody, container: ServiceContainer) -> CrawlRequest:
    return container.crawl_request(
        body.url,
        max_depth=body.max_depth,
        max_pages=body.max_pages,
        delay_ms=body.delay,
        include_patterns=list(body.include_patterns),
        exclude_patterns=body.exclude_patterns,
        follow_external_links=body.follow_external_links,
    )


@router.post("", response_model=ApiResponse)
async def crawl_site(
    body: CrawlBody, container: ServiceContainer = Depends(get_container)
) -> ApiResponse:
    result = await container.ingestion.crawl(to_crawl_request(body, container))
    return ApiResponse(
        success=True,
        message=f"Crawled {result.summary.total_pages} pages",
        data=to_payload(result),
    )


@router.post("/preview", response_model=ApiResponse)
async def preview_crawl(
    body: CrawlBody, container: ServiceContainer = Depends(get_container)
) -> ApiResponse:
    preview = container.ingestion.preview(to_crawl_request(body, container))
    return ApiResponse(success=True, message="Crawl preview", data=to_payload(preview))


@router.post("/analyze", response_model=ApiResponse)
async def analyze_page(
    body: AnalyzeBody, container: ServiceContainer = Depends(get_container)
) -> ApiResponse:
    """Fetch and extract a single page without following its links."""
    page = await container.ingestion.analyze(container.crawl_request(body.url))
    return ApiResponse(success=True, message="Page analyzed", data=to_payload(page))
