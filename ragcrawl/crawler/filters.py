"""URL normalization and link selection for the crawl frontier."""

from __future__ import annotations

import logging
from urllib.parse import urlparse, urlunparse

from ragcrawl.core.errors import validation_error
from ragcrawl.crawler.models import CrawlRequest, Page

logger = logging.getLogger(__name__)

SEARCH_QUERY_MARKERS = ("search=", "q=", "query=")


def normalize_url(url: str) -> str:
    """Return the canonical identity of an absolute URL.

    Scheme and host are lower-cased, an empty path becomes "/" and the
    fragment is dropped, so ``https://EXAMPLE.com`` and
    ``https://example.com/#top`` name the same page.
    """
    parsed = urlparse(url)
    return urlunparse(
        (
            parsed.scheme.lower(),
            parsed.netloc.lower(),
            parsed.path or "/",
            parsed.params,
            parsed.query,
            "",
        )
    )


def normalize_seed_url(url: str) -> str:
    """Validate a seed URL and return it in canonical form.

    Args:
        url: Seed URL supplied by the caller

    Returns:
        URL normalized by ``normalize_url``

    Raises:
        RagCrawlError: VALIDATION if the URL is not an absolute http(s) URL
    """
    try:
        parsed = urlparse(url.strip())
    except ValueError as exc:
        raise validation_error(f"Invalid URL: {exc}", ["url"]) from exc

    if parsed.scheme.lower() not in ("http", "https") or not parsed.hostname:
        raise validation_error("URL must be an absolute http(s) URL", ["url"])

    return normalize_url(url.strip())


def _matches_exclude(pattern: str, link: str, link_path: str, link_query: str,
                     page_url: str) -> bool:
    """Check a single exclude pattern against a link.

    "?" excludes search-style query strings, "#" excludes in-page anchors of
    the current page. Anything else is a substring of the path or the link.
    """
    if pattern == "?":
        return any(marker in link_query for marker in SEARCH_QUERY_MARKERS)
    if pattern == "#":
        if "#" not in link:
            return False
        page = urlparse(page_url)
        return link_path == page.path and link_query == page.query
    return pattern in link_path or pattern in link


def select_links(page: Page, request: CrawlRequest, allowed_domains: list[str]) -> list[str]:
    """Pick the links from a page that are eligible for the frontier.

    Filters run in order: domain allow-list, exclude patterns, include
    patterns. Surviving links are passed through ``normalize_url`` and
    deduplicated, keeping first-seen order.

    Args:
        page: Page whose links are considered
        request: Crawl parameters (patterns, external link policy)
        allowed_domains: Hostnames that may be fetched

    Returns:
        Candidate URLs, not yet checked against visited or queued sets
    """
    candidates = list(page.metadata.links.internal)
    if request.follow_external_links:
        candidates.extend(page.metadata.links.external)

    exclude_patterns = request.effective_exclude_patterns
    selected: list[str] = []

    for link in candidates:
        try:
            parsed = urlparse(link)
        except ValueError:
            logger.debug("Skipping malformed link %s", link)
            continue

        if allowed_domains and parsed.hostname not in allowed_domains:
            continue

        if any(
            _matches_exclude(pattern, link, parsed.path, parsed.query, page.url)
            for pattern in exclude_patterns
        ):
            continue

        if request.include_patterns and not any(
            pattern in parsed.path or pattern in link
            for pattern in request.include_patterns
        ):
            continue

        selected.append(normalize_url(link))

    return list(dict.fromkeys(selected))
