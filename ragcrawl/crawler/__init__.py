"""Web crawling: fetch, extract and link selection."""

from ragcrawl.crawler.crawler import WebCrawler
from ragcrawl.crawler.extractor import PageExtractor
from ragcrawl.crawler.models import (
    DEFAULT_EXCLUDE_PATTERNS,
    CrawlError,
    CrawlPreview,
    CrawlRequest,
    CrawlResult,
    CrawlSummary,
    Page,
)

__all__ = [
    "DEFAULT_EXCLUDE_PATTERNS",
    "CrawlError",
    "CrawlPreview",
    "CrawlRequest",
    "CrawlResult",
    "CrawlSummary",
    "Page",
    "PageExtractor",
    "WebCrawler",
]
