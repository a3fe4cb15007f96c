"""Centralized metadata key definitions for the ragcrawl pipeline.

This module provides a single source of truth for the payload keys written by
the chunker and embedder and read back by the retriever and synthesizer.

Usage:
    from ragcrawl.core.metadata import MetadataKeys

    chunk.metadata[MetadataKeys.URL]  # Instead of chunk.metadata["url"]
"""


class MetadataKeys:
    """Constants for chunk and vector payload keys."""

    __slots__ = ()

    # Source page
    URL = "url"  # Page URL the chunk came from
    TITLE = "title"  # Page title
    DOMAIN = "domain"  # Hostname of the page
    PAGE_DEPTH = "page_depth"  # Crawl depth of the page
    CRAWLED_AT = "crawled_at"  # ISO8601 crawl timestamp

    # Chunking
    CHUNK_INDEX = "chunk_index"  # Position of chunk in page
    TOTAL_CHUNKS = "total_chunks"  # Chunks produced for the page
    WORD_COUNT = "word_count"  # Whitespace tokens in the chunk
    SECTION = "section"  # Approximate section heading
    HEADING_LEVEL = "heading_level"  # Level of the section heading

    # Optional page metadata
    DESCRIPTION = "description"
    AUTHOR = "author"
    LANGUAGE = "language"
    CANONICAL = "canonical"

    # Vector payload
    CONTENT = "content"  # Truncated chunk text for citation display
    VECTOR_ID = "vector_id"  # Stable string id of the record
    NAMESPACE = "namespace"  # Logical partition of the index
    EMBEDDING_MODEL = "embedding_model"  # Model that produced the vector
