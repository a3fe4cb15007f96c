"""Overlapping word-window chunking of crawled pages.

Each page is turned into the text ``"{title}\\n\\n{content}"``, split on
whitespace, and cut into windows of ``chunk_size`` tokens that advance by
``chunk_size - chunk_overlap`` tokens. Windows stop as soon as one reaches the
end of the token stream, so the tail is never re-emitted as a short duplicate.

Example:
    >>> chunks = chunk_pages(result.pages, chunk_size=1000, chunk_overlap=200)
    >>> chunks[0].metadata["chunk_index"]
    0
"""

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

from ragcrawl.core.validation import validate_chunk_window
from ragcrawl.core.metadata import MetadataKeys
from ragcrawl.crawler.models import Page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextChunk:
    """A window of page text with its derived metadata."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)


def split_into_windows(text: str, chunk_size: int, chunk_overlap: int) -> list[str]:
    """Split text into overlapping whitespace-token windows.

    Args:
        text: Text to split
        chunk_size: Tokens per window
        chunk_overlap: Tokens shared by consecutive windows

    Returns:
        Window strings, tokens joined by single spaces. Text without tokens
        comes back unchanged as a single window.
    """
    words = text.split()
    step = chunk_size - chunk_overlap
    windows: list[str] = []

    for start in range(0, len(words), step):
        window = words[start : start + chunk_size]
        if window:
            windows.append(" ".join(window))
        if start + chunk_size >= len(words):
            break

    return windows or [text]


def _page_metadata(page: Page) -> dict[str, Any]:
    hostname = urlparse(page.url).hostname
    if not hostname:
        raise ValueError(f"Cannot derive domain from URL: {page.url}")

    metadata: dict[str, Any] = {
        MetadataKeys.URL: page.url,
        MetadataKeys.TITLE: page.title,
        MetadataKeys.PAGE_DEPTH: page.depth,
        MetadataKeys.DOMAIN: hostname,
        MetadataKeys.CRAWLED_AT: page.crawled_at.isoformat(),
    }

    # Section is approximated by the page's first heading
    if page.metadata.headings:
        first = page.metadata.headings[0]
        metadata[MetadataKeys.SECTION] = first.text
        metadata[MetadataKeys.HEADING_LEVEL] = first.level

    optional = {
        MetadataKeys.DESCRIPTION: page.metadata.description,
        MetadataKeys.LANGUAGE: page.metadata.language,
        MetadataKeys.AUTHOR: page.metadata.author,
        MetadataKeys.CANONICAL: page.metadata.canonical,
    }
    metadata.update({key: value for key, value in optional.items() if value})
    return metadata


def chunk_page(page: Page, chunk_size: int, chunk_overlap: int) -> list[TextChunk]:
    """Chunk a single page.

    Raises:
        ValueError: If page metadata cannot be derived (e.g. URL without host)
    """
    base_metadata = _page_metadata(page)
    windows = split_into_windows(
        f"{page.title}\n\n{page.content}", chunk_size, chunk_overlap
    )

    chunks: list[TextChunk] = []
    for index, window in enumerate(windows):
        metadata = dict(base_metadata)
        metadata[MetadataKeys.CHUNK_INDEX] = index
        metadata[MetadataKeys.TOTAL_CHUNKS] = len(windows)
        metadata[MetadataKeys.WORD_COUNT] = len(window.split())
        chunks.append(TextChunk(content=window, metadata=metadata))
    return chunks


def chunk_pages(
    pages: list[Page], chunk_size: int = 1000, chunk_overlap: int = 200
) -> list[TextChunk]:
    """Chunk pages in order, skipping pages whose metadata cannot be derived.

    Args:
        pages: Crawled pages
        chunk_size: Tokens per window, must be positive
        chunk_overlap: Overlap between windows, 0 <= overlap < chunk_size

    Returns:
        Chunks for all pages, page order then chunk order

    Raises:
        RagCrawlError: VALIDATION if the window parameters are inconsistent
    """
    validate_chunk_window(chunk_size, chunk_overlap)

    chunks: list[TextChunk] = []
    for page in pages:
        try:
            chunks.extend(chunk_page(page, chunk_size, chunk_overlap))
        except ValueError as exc:
            logger.warning("Skipping page %s during chunking: %s", page.url, exc)

    logger.info("Chunked %d pages into %d chunks", len(pages), len(chunks))
    return chunks
