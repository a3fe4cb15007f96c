"""Unit tests for the query-side RAG service."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ragcrawl.core.errors import ErrorKind, RagCrawlError
from ragcrawl.services.rag import RAGService
from ragcrawl.storage.models import IndexStats
from tests.fixtures.providers import FakeEmbeddingProvider

pytestmark = pytest.mark.asyncio


@pytest.fixture
def vector_store() -> MagicMock:
    store = MagicMock()
    store.stats = AsyncMock(
        return_value=IndexStats(index_name="ragcrawl", exists=True, total_vector_count=30)
    )
    store.count_namespace = AsyncMock(return_value=12)
    store.namespace_counts = AsyncMock(return_value={"prod": 12, "docs": 18})
    store.validate_services = AsyncMock()
    return store


@pytest.fixture
def service(vector_store: MagicMock) -> RAGService:
    retriever = MagicMock()
    retriever.search = AsyncMock(return_value="search-result")
    retriever.embeddings = FakeEmbeddingProvider()
    synthesizer = MagicMock()
    synthesizer.answer = AsyncMock(return_value="answer")
    return RAGService(retriever, synthesizer, vector_store)


class TestRAGService:
    async def test_search_and_answer_delegate(self, service: RAGService) -> None:
        assert await service.search("q", "docs", top_k=3) == "search-result"
        assert await service.answer("q", "docs", metadata_filter={"domain": "x"}) == "answer"

        service.retriever.search.assert_awaited_once_with(
            "q", "docs", top_k=3, metadata_filter=None
        )
        service.synthesizer.answer.assert_awaited_once_with(
            "q", "docs", top_k=5, metadata_filter={"domain": "x"}
        )

    async def test_namespace_stats(self, service: RAGService) -> None:
        stats = await service.namespace_stats("prod")

        assert stats.vector_count == 12
        assert stats.total_vector_count == 30
        assert stats.index_fullness == 0.0

    async def test_empty_namespace_is_not_found(
        self, service: RAGService, vector_store: MagicMock
    ) -> None:
        vector_store.count_namespace.return_value = 0

        with pytest.raises(RagCrawlError) as exc_info:
            await service.namespace_stats("ghost")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    async def test_missing_index_is_not_found(
        self, service: RAGService, vector_store: MagicMock
    ) -> None:
        vector_store.stats.return_value = IndexStats(index_name="ragcrawl", exists=False)

        with pytest.raises(RagCrawlError) as exc_info:
            await service.namespace_stats("prod")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        vector_store.count_namespace.assert_not_awaited()

    async def test_list_namespaces_sorted(self, service: RAGService) -> None:
        listing = await service.list_namespaces()

        assert listing.index_name == "ragcrawl"
        assert listing.namespaces == ["docs", "prod"]

    async def test_list_namespaces_of_missing_index(
        self, service: RAGService, vector_store: MagicMock
    ) -> None:
        vector_store.stats.return_value = IndexStats(index_name="ragcrawl", exists=False)

        listing = await service.list_namespaces()

        assert listing.namespaces == []
        vector_store.namespace_counts.assert_not_awaited()

    async def test_index_stats_validates_name(self, service: RAGService) -> None:
        with pytest.raises(RagCrawlError) as exc_info:
            await service.index_stats("Not_Valid")

        assert exc_info.value.details["fields"] == ["index_name"]


class TestHealthCheck:
    async def test_all_providers_operational(self, service: RAGService) -> None:
        report = await service.check_health()

        assert report.healthy
        assert report.services == {"qdrant": "operational", "embeddings": "operational"}
        assert report.namespace_count == 2
        assert report.errors == []

    async def test_qdrant_unreachable(
        self, service: RAGService, vector_store: MagicMock
    ) -> None:
        vector_store.validate_services.side_effect = ValueError(
            "Qdrant health check failed: refused"
        )

        report = await service.check_health()

        assert report.status == "unhealthy"
        assert report.services == {"qdrant": "error", "embeddings": "operational"}
        assert report.namespace_count is None
        assert report.errors == ["Qdrant health check failed: refused"]

    async def test_embedding_server_unreachable(self, service: RAGService) -> None:
        service.retriever.embeddings = FakeEmbeddingProvider(healthy=False)

        report = await service.check_health()

        assert not report.healthy
        assert report.services["embeddings"] == "error"
        assert report.services["qdrant"] == "operational"

    async def test_namespace_listing_failure_is_unhealthy(
        self, service: RAGService, vector_store: MagicMock
    ) -> None:
        vector_store.namespace_counts.side_effect = RagCrawlError(
            ErrorKind.UPSTREAM, "Failed to list namespaces"
        )

        report = await service.check_health()

        assert report.services["qdrant"] == "error"
        assert report.errors == ["Failed to list namespaces"]
