"""Ingestion service: crawl a site and index it for retrieval."""

from __future__ import annotations

import logging
import time
from dataclasses import replace

from ragcrawl.core.errors import ErrorKind, RagCrawlError, upstream_error, validation_error
from ragcrawl.core.metadata import MetadataKeys
from ragcrawl.core.validation import (
    validate_chunk_window,
    validate_index_name,
    validate_namespace,
)
from ragcrawl.crawler.crawler import WebCrawler
from ragcrawl.crawler.models import CrawlPreview, CrawlRequest, CrawlResult, Page
from ragcrawl.processing.chunker import TextChunk, chunk_pages
from ragcrawl.services.models import (
    EmbeddingInfo,
    PageSummary,
    SampleChunk,
    VectorizeDryRun,
    VectorizePreview,
    VectorizeRequest,
    VectorStoreResult,
)
from ragcrawl.storage.embedder import Embedder
from ragcrawl.storage.qdrant import VectorStoreManager

logger = logging.getLogger(__name__)

DRY_RUN_CHUNK_SIZE = 500
DRY_RUN_CHUNK_OVERLAP = 50
SAMPLE_CHUNK_CHARS = 200


def _token_count(chunks: list[TextChunk]) -> int:
    return sum(chunk.metadata.get(MetadataKeys.WORD_COUNT, 0) for chunk in chunks)


class IngestionService:
    """Coordinate crawling, chunking, embedding and vector storage.

    Args:
        crawler: Web crawler
        embedder: Chunk embedder
        vector_store: Qdrant store manager
    """

    def __init__(
        self,
        crawler: WebCrawler,
        embedder: Embedder,
        vector_store: VectorStoreManager,
    ) -> None:
        self.crawler = crawler
        self.embedder = embedder
        self.vector_store = vector_store

    async def crawl(self, request: CrawlRequest) -> CrawlResult:
        return await self.crawler.crawl(request)

    def preview(self, request: CrawlRequest) -> CrawlPreview:
        return self.crawler.preview(request)

    async def analyze(self, request: CrawlRequest) -> Page:
        """Fetch and extract the seed page only, following no links.

        Raises:
            RagCrawlError: VALIDATION for a bad URL or a non-HTML response,
                UPSTREAM when the page cannot be fetched
        """
        result = await self.crawler.crawl(
            replace(request, max_depth=0, max_pages=1, delay_ms=0)
        )
        if result.pages:
            return result.pages[0]
        if result.summary.errors:
            failure = result.summary.errors[0]
            raise RagCrawlError(
                ErrorKind.UPSTREAM,
                f"Failed to fetch {failure.url}",
                {"diagnostic": failure.error},
            )
        raise validation_error("URL did not return an HTML page", ["url"])

    async def preview_vectorize(self, request: VectorizeRequest) -> VectorizePreview:
        """Crawl and chunk a site, reporting what vectorize would store.

        Nothing is embedded or written to the index.

        Raises:
            RagCrawlError: VALIDATION for bad parameters
        """
        validate_index_name(request.index_name)
        validate_namespace(request.namespace)
        validate_chunk_window(request.chunk_size, request.chunk_overlap)

        crawl_result = await self.crawler.crawl(request.crawl)
        chunks = chunk_pages(crawl_result.pages, request.chunk_size, request.chunk_overlap)
        return VectorizePreview(
            index_name=request.index_name,
            namespace=request.namespace,
            chunk_size=request.chunk_size,
            chunk_overlap=request.chunk_overlap,
            total_pages=crawl_result.summary.total_pages,
            estimated_vectors=len(chunks),
            estimated_tokens=_token_count(chunks),
            crawl_summary=crawl_result.summary,
        )

    async def dry_run(
        self,
        request: CrawlRequest,
        chunk_size: int = DRY_RUN_CHUNK_SIZE,
        chunk_overlap: int = DRY_RUN_CHUNK_OVERLAP,
    ) -> VectorizeDryRun:
        """Chunk the seed page without embedding or storing anything.

        Raises:
            RagCrawlError: as ``analyze``, plus VALIDATION for a bad window
        """
        validate_chunk_window(chunk_size, chunk_overlap)
        page = await self.analyze(request)
        chunks = chunk_pages([page], chunk_size, chunk_overlap)

        sample = None
        if chunks:
            first = chunks[0]
            sample = SampleChunk(
                content=first.content[:SAMPLE_CHUNK_CHARS],
                word_count=first.metadata[MetadataKeys.WORD_COUNT],
                chunk_index=first.metadata[MetadataKeys.CHUNK_INDEX],
                total_chunks=first.metadata[MetadataKeys.TOTAL_CHUNKS],
                section=first.metadata.get(MetadataKeys.SECTION),
            )

        return VectorizeDryRun(
            page=PageSummary(
                url=page.url, title=page.title, word_count=page.metadata.word_count
            ),
            total_chunks=len(chunks),
            estimated_vectors=len(chunks),
            estimated_tokens=_token_count(chunks),
            sample_chunk=sample,
        )

    async def vectorize(self, request: VectorizeRequest) -> VectorStoreResult:
        """Crawl, chunk, embed and store a site.

        Storage only starts once every chunk has been embedded, so an
        embedding failure leaves the index untouched.

        Args:
            request: Crawl and indexing parameters

        Returns:
            VectorStoreResult summarizing the run

        Raises:
            RagCrawlError: VALIDATION for bad parameters or when the crawl
                yields no chunks, UPSTREAM when a provider fails
        """
        validate_index_name(request.index_name)
        validate_namespace(request.namespace)
        validate_chunk_window(request.chunk_size, request.chunk_overlap)

        start_time = time.monotonic()
        logger.info(
            "Vectorizing %s into %s/%s",
            request.crawl.url,
            request.index_name,
            request.namespace,
        )

        crawl_result = await self.crawler.crawl(request.crawl)
        chunks = chunk_pages(crawl_result.pages, request.chunk_size, request.chunk_overlap)
        if not chunks:
            raise validation_error(
                "No text chunks generated from crawled pages", ["url"]
            )

        records = await self.embedder.embed(chunks)
        if not records:
            raise upstream_error("Embedding provider returned no embeddings")

        await self.vector_store.ensure_collection(request.index_name)
        stored = await self.vector_store.store(
            records, namespace=request.namespace, index=request.index_name
        )

        duration = time.monotonic() - start_time
        logger.info(
            "Stored %d vectors from %d pages in %.2fs",
            stored,
            crawl_result.summary.total_pages,
            duration,
        )

        return VectorStoreResult(
            index_name=request.index_name,
            namespace=request.namespace,
            vectors_stored=stored,
            total_chunks=len(chunks),
            crawl_summary=crawl_result.summary,
            duration=duration,
            embeddings=EmbeddingInfo(
                model=self.embedder.model_name,
                dimensions=len(records[0].values),
                total_tokens=_token_count(chunks),
            ),
        )
