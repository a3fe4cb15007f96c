"""Breadth-first web crawler.

Fetches a bounded, deduplicated set of same-site pages starting from a seed
URL. Pages are fetched in batches of at most ``max_concurrent``; every batch
holds pages of a single depth, so depth ``d`` completes before depth ``d + 1``
starts. Frontier, visited set and results are only touched by the coordinating
coroutine after a batch settles.

Example:
    >>> async with httpx.AsyncClient() as client:
    ...     crawler = WebCrawler(client=client)
    ...     result = await crawler.crawl(CrawlRequest(url="https://example.com"))
    ...     print(result.summary.total_pages)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from urllib.parse import urlparse

import httpx

from ragcrawl.crawler.extractor import PageExtractor
from ragcrawl.crawler.filters import normalize_seed_url, select_links
from ragcrawl.crawler.models import (
    CrawlError,
    CrawlPreview,
    CrawlRequest,
    CrawlResult,
    CrawlSummary,
    Page,
)

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 5

HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


@dataclass(frozen=True)
class FetchOutcome:
    """Result of fetching one frontier entry.

    Exactly one of page/error is set, or neither when the response was
    skipped (non-HTML content).
    """

    url: str
    page: Page | None = None
    error: CrawlError | None = None


class WebCrawler:
    """Crawl a site breadth-first within page, depth and domain bounds.

    Args:
        client: Shared HTTP client. When omitted, a client is created for the
            duration of each crawl.
        extractor: Page extractor, defaults to ``PageExtractor()``
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        extractor: PageExtractor | None = None,
    ) -> None:
        self._client = client
        self._extractor = extractor or PageExtractor()

    async def crawl(self, request: CrawlRequest) -> CrawlResult:
        """Crawl starting at ``request.url``.

        Per-page failures never abort the crawl; they are recorded in
        ``summary.errors``.

        Args:
            request: Crawl parameters

        Returns:
            CrawlResult with pages in completion order and a summary

        Raises:
            RagCrawlError: VALIDATION if the seed URL is not absolute http(s)
        """
        seed = normalize_seed_url(request.url)
        allowed_domains = self._allowed_domains(seed, request)

        logger.info(
            "Starting crawl of %s (max_depth=%d, max_pages=%d)",
            seed,
            request.max_depth,
            request.max_pages,
        )

        if self._client is not None:
            return await self._run(self._client, seed, allowed_domains, request)

        async with httpx.AsyncClient(
            timeout=request.timeout,
            follow_redirects=True,
            max_redirects=MAX_REDIRECTS,
        ) as client:
            return await self._run(client, seed, allowed_domains, request)

    def preview(self, request: CrawlRequest) -> CrawlPreview:
        """Describe a crawl without fetching anything.

        Raises:
            RagCrawlError: VALIDATION if the seed URL is not absolute http(s)
        """
        seed = normalize_seed_url(request.url)
        return CrawlPreview(
            starting_url=seed,
            allowed_domains=self._allowed_domains(seed, request),
            estimated_pages=min(10**request.max_depth, request.max_pages),
            config={
                "max_depth": request.max_depth,
                "max_pages": request.max_pages,
                "delay_ms": request.delay_ms,
                "include_patterns": list(request.include_patterns),
                "exclude_patterns": request.effective_exclude_patterns,
                "follow_external_links": request.follow_external_links,
                "max_concurrent": request.max_concurrent,
            },
        )

    async def _run(
        self,
        client: httpx.AsyncClient,
        seed: str,
        allowed_domains: list[str],
        request: CrawlRequest,
    ) -> CrawlResult:
        start_time = time.monotonic()
        max_concurrent = max(1, request.max_concurrent)
        delay_seconds = request.delay_ms / 1000

        pages: list[Page] = []
        errors: list[CrawlError] = []
        visited: set[str] = set()
        frontier: deque[tuple[str, int]] = deque([(seed, 0)])
        queued: set[str] = {seed}

        while frontier and len(pages) < request.max_pages:
            batch = self._next_batch(frontier, max_concurrent)
            for url, _ in batch:
                queued.discard(url)
                visited.add(url)

            outcomes = await asyncio.gather(
                *(self._fetch_page(client, url, depth, request) for url, depth in batch),
                return_exceptions=True,
            )

            new_pages: list[Page] = []
            for (url, _), outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    logger.error("Unexpected failure crawling %s: %s", url, outcome)
                    errors.append(CrawlError(url=url, error=str(outcome) or type(outcome).__name__))
                elif outcome.error is not None:
                    errors.append(outcome.error)
                elif outcome.page is not None:
                    new_pages.append(outcome.page)

            pages.extend(new_pages)

            for page in new_pages:
                if page.depth >= request.max_depth:
                    continue
                for link in select_links(page, request, allowed_domains):
                    if len(pages) + len(frontier) >= request.max_pages:
                        break
                    if link in visited or link in queued:
                        continue
                    frontier.append((link, page.depth + 1))
                    queued.add(link)

            if len(batch) > 1 and delay_seconds > 0:
                await asyncio.sleep(delay_seconds * len(batch) / max_concurrent)
            if frontier and len(pages) < request.max_pages and delay_seconds > 0:
                await asyncio.sleep(delay_seconds)

        duration = time.monotonic() - start_time
        summary = self._summarize(pages, errors, duration)
        logger.info(
            "Crawl of %s finished: %d pages, %d errors in %.2fs",
            seed,
            summary.total_pages,
            len(errors),
            duration,
        )
        return CrawlResult(pages=pages, summary=summary)

    @staticmethod
    def _next_batch(
        frontier: deque[tuple[str, int]], max_concurrent: int
    ) -> list[tuple[str, int]]:
        """Dequeue up to max_concurrent entries sharing the head's depth."""
        batch_depth = frontier[0][1]
        batch: list[tuple[str, int]] = []
        while frontier and len(batch) < max_concurrent and frontier[0][1] == batch_depth:
            batch.append(frontier.popleft())
        return batch

    async def _fetch_page(
        self,
        client: httpx.AsyncClient,
        url: str,
        depth: int,
        request: CrawlRequest,
    ) -> FetchOutcome:
        try:
            response = await client.get(
                url,
                headers={"User-Agent": request.user_agent, "Accept": HTML_ACCEPT},
                timeout=request.timeout,
                follow_redirects=True,
            )
        except httpx.HTTPError as exc:
            logger.warning("Failed to fetch %s: %s", url, exc)
            return FetchOutcome(
                url=url, error=CrawlError(url=url, error=str(exc) or type(exc).__name__)
            )

        if response.status_code >= 400:
            logger.warning("HTTP %d for %s", response.status_code, url)
            return FetchOutcome(
                url=url,
                error=CrawlError(
                    url=url,
                    error=f"HTTP {response.status_code}",
                    status=response.status_code,
                ),
            )

        content_type = response.headers.get("content-type", "")
        if "text/html" not in content_type:
            logger.debug("Skipping non-HTML content at %s (%s)", url, content_type)
            return FetchOutcome(url=url)

        page = self._extractor.extract(response.text, url, depth, response.status_code)
        logger.debug("Crawled %s (depth %d, %d words)", url, depth, page.metadata.word_count)
        return FetchOutcome(url=url, page=page)

    @staticmethod
    def _allowed_domains(seed: str, request: CrawlRequest) -> list[str]:
        if request.allowed_domains:
            return [domain.lower() for domain in request.allowed_domains]
        hostname = urlparse(seed).hostname
        return [hostname] if hostname else []

    @staticmethod
    def _summarize(
        pages: list[Page], errors: list[CrawlError], duration: float
    ) -> CrawlSummary:
        domains = {urlparse(page.url).hostname or "" for page in pages}
        return CrawlSummary(
            total_pages=len(pages),
            total_words=sum(page.metadata.word_count for page in pages),
            max_depth_reached=max((page.depth for page in pages), default=0),
            duration=duration,
            unique_domains=sorted(domain for domain in domains if domain),
            errors=errors,
        )
