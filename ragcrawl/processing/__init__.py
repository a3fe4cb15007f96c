"""Page chunking."""

from ragcrawl.processing.chunker import TextChunk, chunk_page, chunk_pages, split_into_windows

__all__ = ["TextChunk", "chunk_page", "chunk_pages", "split_into_windows"]
