"""Shared pytest fixtures for ragcrawl unit tests."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from ragcrawl.core.config import Settings
from tests.fixtures.providers import FakeEmbeddingProvider


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        environment="test",
        log_file=tmp_path / "ragcrawl.log",
        qdrant_url="http://qdrant.test:6333",
        tei_endpoint="http://tei.test:80",
        crawl_delay_ms=0,
        openai_api_key=None,
        api_key=None,
    )


@pytest.fixture
def fake_embeddings() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def mock_qdrant_client() -> MagicMock:
    """AsyncQdrantClient stand-in with every used coroutine mocked."""
    client = MagicMock()
    client.collection_exists = AsyncMock(return_value=True)
    client.create_collection = AsyncMock()
    client.create_payload_index = AsyncMock()
    client.upsert = AsyncMock()
    client.query_points = AsyncMock()
    client.count = AsyncMock()
    client.scroll = AsyncMock(return_value=([], None))
    client.get_collection = AsyncMock()
    client.get_collections = AsyncMock()
    client.close = AsyncMock()
    return client
