"""Unit tests for the ragcrawl CLI commands.

Services are replaced through ``build_container`` so commands run without
network access.
"""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from ragcrawl.cli.app import app
from ragcrawl.core.config import Settings
from ragcrawl.core.errors import not_found
from ragcrawl.crawler.models import CrawlError, CrawlResult, CrawlSummary
from ragcrawl.retrieval.models import RAGAnswer, SearchResult
from ragcrawl.services.container import ServiceContainer
from ragcrawl.services.models import NamespaceList
from ragcrawl.storage.models import RankedMatch

runner = CliRunner()


@pytest.fixture
def container(settings: Settings) -> Iterator[ServiceContainer]:
    services = ServiceContainer(
        settings=settings,
        http_client=MagicMock(aclose=AsyncMock()),
        vector_store=MagicMock(close=AsyncMock()),
        ingestion=MagicMock(),
        rag=MagicMock(),
    )
    with (
        patch("ragcrawl.cli.runtime.load_settings", return_value=settings),
        patch("ragcrawl.cli.runtime.configure_logging"),
        patch("ragcrawl.cli.runtime.build_container", return_value=services),
    ):
        yield services


@pytest.mark.parametrize(
    "command", ["crawl", "vectorize", "query", "search", "stats", "serve"]
)
def test_command_help(command: str) -> None:
    result = runner.invoke(app, [command, "--help"])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_crawl_prints_summary(container: ServiceContainer) -> None:
    container.ingestion.crawl = AsyncMock(
        return_value=CrawlResult(
            pages=[],
            summary=CrawlSummary(
                total_pages=4,
                total_words=900,
                max_depth_reached=2,
                duration=1.5,
                unique_domains=["example.com"],
                errors=[CrawlError(url="https://example.com/x", error="HTTP 404", status=404)],
            ),
        )
    )

    result = runner.invoke(app, ["crawl", "https://example.com", "--depth", "2"])

    assert result.exit_code == 0
    assert "Pages: 4" in result.output
    assert "HTTP 404" in result.output
    request = container.ingestion.crawl.call_args.args[0]
    assert request.max_depth == 2
    assert request.max_pages == container.settings.crawl_max_pages
    container.http_client.aclose.assert_awaited_once()


def test_query_prints_answer_and_sources(container: ServiceContainer) -> None:
    container.rag.answer = AsyncMock(
        return_value=RAGAnswer(
            answer="Paris.",
            sources=[
                RankedMatch(id="a", score=0.9, metadata={"title": "Capitals", "url": "u"})
            ],
            confidence=90.0,
            namespace="default",
            query="capital?",
        )
    )

    result = runner.invoke(app, ["query", "capital?", "-N", "geo"])

    assert result.exit_code == 0
    assert "Paris." in result.output
    assert "Capitals" in result.output
    assert container.rag.answer.call_args.args == ("capital?", "geo")


def test_search_without_matches(container: ServiceContainer) -> None:
    container.rag.search = AsyncMock(
        return_value=SearchResult(query="q", namespace="default", matches=[])
    )

    result = runner.invoke(app, ["search", "q"])

    assert result.exit_code == 0
    assert "No matches found" in result.output


def test_stats_lists_namespaces(container: ServiceContainer) -> None:
    container.rag.list_namespaces = AsyncMock(
        return_value=NamespaceList(index_name="ragcrawl", namespaces=["docs", "prod"])
    )

    result = runner.invoke(app, ["stats"])

    assert result.exit_code == 0
    assert "docs" in result.output
    assert "prod" in result.output


def test_core_error_exits_with_code_one(container: ServiceContainer) -> None:
    container.rag.namespace_stats = AsyncMock(side_effect=not_found("Namespace 'x' not found"))

    result = runner.invoke(app, ["stats", "x"])

    assert result.exit_code == 1
    assert "NOT_FOUND" in result.output
