"""Unit tests for the crawl-to-index ingestion service."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ragcrawl.core.errors import ErrorKind, RagCrawlError
from ragcrawl.crawler.models import (
    CrawlError,
    CrawlRequest,
    CrawlResult,
    CrawlSummary,
    Page,
    PageMetadata,
)
from ragcrawl.services.ingestion import IngestionService
from ragcrawl.services.models import VectorizeRequest
from ragcrawl.storage.embedder import Embedder
from ragcrawl.storage.qdrant import VectorStoreManager
from tests.fixtures.providers import FakeEmbeddingProvider

pytestmark = pytest.mark.asyncio


def _crawl_result(pages: list[Page], errors: list[CrawlError] | None = None) -> CrawlResult:
    return CrawlResult(
        pages=pages,
        summary=CrawlSummary(
            total_pages=len(pages),
            total_words=sum(p.metadata.word_count for p in pages),
            max_depth_reached=max((p.depth for p in pages), default=0),
            duration=0.1,
            unique_domains=["example.com"] if pages else [],
            errors=errors or [],
        ),
    )


def _page(path: str, words: int) -> Page:
    content = " ".join(f"word{i}" for i in range(words))
    return Page(
        url=f"https://example.com{path}",
        title="Docs",
        content=content,
        metadata=PageMetadata(word_count=words),
        status=200,
        depth=0,
    )


def _service(
    crawl_result: CrawlResult,
    qdrant_client: MagicMock,
    provider: FakeEmbeddingProvider | None = None,
) -> IngestionService:
    crawler = MagicMock()
    crawler.crawl = AsyncMock(return_value=crawl_result)
    embedder = Embedder(provider or FakeEmbeddingProvider(), batch_delay=0, model_name="bge-m3")
    store = VectorStoreManager(client=qdrant_client, dimensions=4, batch_delay=0)
    return IngestionService(crawler, embedder, store)


def _request(**kwargs: object) -> VectorizeRequest:
    values: dict[str, object] = {
        "crawl": CrawlRequest(url="https://example.com/"),
        "index_name": "docs-index",
        "namespace": "prod",
        "chunk_size": 100,
        "chunk_overlap": 20,
    }
    values.update(kwargs)
    return VectorizeRequest(**values)  # type: ignore[arg-type]


class TestVectorize:
    async def test_vectorize_stores_all_chunks(self, mock_qdrant_client: MagicMock) -> None:
        crawl = _crawl_result(
            [_page("/a", 50), _page("/b", 250)],
            errors=[CrawlError(url="https://example.com/broken", error="HTTP 404", status=404)],
        )
        service = _service(crawl, mock_qdrant_client)

        result = await service.vectorize(_request())

        # "/a" fits one window; "/b" (251 tokens with the title) needs three
        assert result.total_chunks == 4
        assert result.vectors_stored == 4
        assert result.index_name == "docs-index"
        assert result.namespace == "prod"
        assert result.embeddings.model == "bge-m3"
        assert result.embeddings.dimensions == 4
        assert result.crawl_summary.errors[0].status == 404
        upsert = mock_qdrant_client.upsert.call_args.kwargs
        assert upsert["collection_name"] == "docs-index"
        assert {p.payload["namespace"] for p in upsert["points"]} == {"prod"}

    async def test_empty_crawl_is_validation_error(self, mock_qdrant_client: MagicMock) -> None:
        service = _service(_crawl_result([]), mock_qdrant_client)

        with pytest.raises(RagCrawlError) as exc_info:
            await service.vectorize(_request())

        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert exc_info.value.details["fields"] == ["url"]
        mock_qdrant_client.upsert.assert_not_awaited()

    async def test_embedding_failure_stores_nothing(self, mock_qdrant_client: MagicMock) -> None:
        provider = FakeEmbeddingProvider(fail_on_call=1)
        service = _service(_crawl_result([_page("/a", 50)]), mock_qdrant_client, provider)

        with pytest.raises(RagCrawlError) as exc_info:
            await service.vectorize(_request())

        assert exc_info.value.kind is ErrorKind.UPSTREAM
        mock_qdrant_client.upsert.assert_not_awaited()

    async def test_second_batch_failure_stores_nothing(self, mock_qdrant_client: MagicMock) -> None:
        """A failure after a successful batch still leaves the index untouched."""
        pages = [_page(f"/p{i}", 50) for i in range(150)]
        provider = FakeEmbeddingProvider(fail_on_call=2)
        service = _service(_crawl_result(pages), mock_qdrant_client, provider)

        with pytest.raises(RagCrawlError) as exc_info:
            await service.vectorize(_request())

        assert exc_info.value.kind is ErrorKind.UPSTREAM
        assert [len(batch) for batch in provider.batch_calls] == [100, 50]
        mock_qdrant_client.upsert.assert_not_awaited()

    async def test_inconsistent_window_rejected_before_crawling(
        self, mock_qdrant_client: MagicMock
    ) -> None:
        service = _service(_crawl_result([_page("/a", 50)]), mock_qdrant_client)

        with pytest.raises(RagCrawlError) as exc_info:
            await service.vectorize(_request(chunk_size=150, chunk_overlap=200))

        assert exc_info.value.details["fields"] == ["chunk_overlap"]
        service.crawler.crawl.assert_not_awaited()

    @pytest.mark.parametrize(
        ("overrides", "field"),
        [({"index_name": "Bad_Index"}, "index_name"), ({"namespace": "no spaces"}, "namespace")],
    )
    async def test_invalid_target_is_rejected_before_crawling(
        self, mock_qdrant_client: MagicMock, overrides: dict[str, str], field: str
    ) -> None:
        service = _service(_crawl_result([_page("/a", 50)]), mock_qdrant_client)

        with pytest.raises(RagCrawlError) as exc_info:
            await service.vectorize(_request(**overrides))

        assert exc_info.value.details["fields"] == [field]
        service.crawler.crawl.assert_not_awaited()


class TestCrawlPassThrough:
    async def test_crawl_and_preview_delegate(self, mock_qdrant_client: MagicMock) -> None:
        crawl = _crawl_result([_page("/a", 10)])
        service = _service(crawl, mock_qdrant_client)
        service.crawler.preview = MagicMock(return_value="preview")
        request = CrawlRequest(url="https://example.com/")

        assert await service.crawl(request) is crawl
        assert service.preview(request) == "preview"


class TestPreviewVectorize:
    async def test_estimates_without_embedding(self, mock_qdrant_client: MagicMock) -> None:
        provider = FakeEmbeddingProvider()
        service = _service(
            _crawl_result([_page("/a", 50), _page("/b", 250)]), mock_qdrant_client, provider
        )

        preview = await service.preview_vectorize(_request())

        assert preview.total_pages == 2
        assert preview.estimated_vectors == 4
        # 51 tokens for "/a" plus windows of 100, 100 and 91 for "/b"
        assert preview.estimated_tokens == 342
        assert (preview.chunk_size, preview.chunk_overlap) == (100, 20)
        assert provider.batch_calls == []
        mock_qdrant_client.upsert.assert_not_awaited()

    async def test_invalid_index_rejected(self, mock_qdrant_client: MagicMock) -> None:
        service = _service(_crawl_result([]), mock_qdrant_client)

        with pytest.raises(RagCrawlError) as exc_info:
            await service.preview_vectorize(_request(index_name="Bad_Index"))

        assert exc_info.value.kind is ErrorKind.VALIDATION
        service.crawler.crawl.assert_not_awaited()


class TestSinglePage:
    async def test_analyze_fetches_seed_only(self, mock_qdrant_client: MagicMock) -> None:
        page = _page("/", 10)
        service = _service(_crawl_result([page]), mock_qdrant_client)

        result = await service.analyze(CrawlRequest(url="https://example.com/", max_depth=3))

        assert result is page
        request = service.crawler.crawl.call_args.args[0]
        assert (request.max_depth, request.max_pages) == (0, 1)

    async def test_analyze_fetch_failure_is_upstream(self, mock_qdrant_client: MagicMock) -> None:
        crawl = _crawl_result(
            [], errors=[CrawlError(url="https://example.com/", error="HTTP 503", status=503)]
        )
        service = _service(crawl, mock_qdrant_client)

        with pytest.raises(RagCrawlError) as exc_info:
            await service.analyze(CrawlRequest(url="https://example.com/"))

        assert exc_info.value.kind is ErrorKind.UPSTREAM
        assert exc_info.value.details["diagnostic"] == "HTTP 503"

    async def test_analyze_non_html_is_validation(self, mock_qdrant_client: MagicMock) -> None:
        service = _service(_crawl_result([]), mock_qdrant_client)

        with pytest.raises(RagCrawlError) as exc_info:
            await service.analyze(CrawlRequest(url="https://example.com/file"))

        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert exc_info.value.details["fields"] == ["url"]

    async def test_dry_run_reports_sample_chunk(self, mock_qdrant_client: MagicMock) -> None:
        provider = FakeEmbeddingProvider()
        service = _service(_crawl_result([_page("/", 700)]), mock_qdrant_client, provider)

        result = await service.dry_run(CrawlRequest(url="https://example.com/"))

        # 701 tokens in windows of 500 advancing by 450
        assert result.total_chunks == 2
        assert result.estimated_vectors == 2
        assert result.estimated_tokens == 500 + 251
        assert result.page.word_count == 700
        assert result.sample_chunk is not None
        assert result.sample_chunk.chunk_index == 0
        assert result.sample_chunk.total_chunks == 2
        assert len(result.sample_chunk.content) == 200
        assert provider.batch_calls == []
        mock_qdrant_client.upsert.assert_not_awaited()
