"""Unit tests for service wiring."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ragcrawl.core.config import Settings
from ragcrawl.core.errors import ErrorKind, RagCrawlError
from ragcrawl.retrieval.completion import OpenAICompletionClient
from ragcrawl.services.container import ServiceContainer, build_container


class TestBuildContainer:
    def test_wires_configured_index(self, settings: Settings) -> None:
        container = build_container(settings)

        assert container.vector_store.collection_name == settings.index_name
        assert container.ingestion.embedder.model_name == settings.tei_model_name
        assert container.completion is None

    def test_completion_client_built_with_key(self, settings: Settings) -> None:
        settings.openai_api_key = "sk-test"

        container = build_container(settings)

        assert isinstance(container.completion, OpenAICompletionClient)

    @pytest.mark.asyncio
    async def test_missing_completion_key_is_upstream(self, settings: Settings) -> None:
        container = build_container(settings)

        with pytest.raises(RagCrawlError) as exc_info:
            await container.rag.synthesizer.completion.complete("system", "user")

        assert exc_info.value.kind is ErrorKind.UPSTREAM
        await container.aclose()


class TestServiceContainer:
    def test_crawl_request_uses_settings_defaults(self, settings: Settings) -> None:
        container = ServiceContainer(
            settings=settings,
            http_client=MagicMock(),
            vector_store=MagicMock(),
            ingestion=MagicMock(),
            rag=MagicMock(),
        )

        request = container.crawl_request("https://example.com", max_pages=5, max_depth=None)

        assert request.max_pages == 5
        assert request.max_depth == settings.crawl_max_depth
        assert request.delay_ms == 0
        assert request.user_agent == settings.crawl_user_agent

    @pytest.mark.asyncio
    async def test_aclose_closes_every_client(self, settings: Settings) -> None:
        completion = MagicMock(close=AsyncMock())
        container = ServiceContainer(
            settings=settings,
            http_client=MagicMock(aclose=AsyncMock()),
            vector_store=MagicMock(close=AsyncMock()),
            ingestion=MagicMock(),
            rag=MagicMock(),
            completion=completion,
        )

        await container.aclose()

        container.http_client.aclose.assert_awaited_once()
        container.vector_store.close.assert_awaited_once()
        completion.close.assert_awaited_once()
