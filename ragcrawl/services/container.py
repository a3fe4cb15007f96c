"""Construction of provider clients and services from settings.

The CLI and the API lifespan each build one container and pass its services
down; nothing in the package holds module-level client instances.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from ragcrawl.core.config import Settings
from ragcrawl.core.errors import upstream_error
from ragcrawl.crawler.crawler import MAX_REDIRECTS, WebCrawler
from ragcrawl.crawler.models import CrawlRequest
from ragcrawl.retrieval.completion import OpenAICompletionClient
from ragcrawl.retrieval.retriever import Retriever
from ragcrawl.retrieval.synthesizer import AnswerSynthesizer
from ragcrawl.services.ingestion import IngestionService
from ragcrawl.services.rag import RAGService
from ragcrawl.storage.embedder import Embedder
from ragcrawl.storage.embeddings import TEIClient
from ragcrawl.storage.qdrant import VectorStoreManager


@dataclass
class ServiceContainer:
    """Services sharing one set of provider clients."""

    settings: Settings
    http_client: httpx.AsyncClient
    vector_store: VectorStoreManager
    ingestion: IngestionService
    rag: RAGService
    completion: OpenAICompletionClient | None = None

    def crawl_request(self, url: str, **overrides: object) -> CrawlRequest:
        """Build a CrawlRequest with configured defaults for unset values."""
        values: dict[str, object] = {
            "max_depth": self.settings.crawl_max_depth,
            "max_pages": self.settings.crawl_max_pages,
            "delay_ms": self.settings.crawl_delay_ms,
            "max_concurrent": self.settings.crawl_max_concurrent,
            "timeout": self.settings.crawl_timeout,
            "user_agent": self.settings.crawl_user_agent,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return CrawlRequest(url=url, **values)  # type: ignore[arg-type]

    async def aclose(self) -> None:
        await self.http_client.aclose()
        await self.vector_store.close()
        if self.completion is not None:
            await self.completion.close()


class _MissingCompletion:
    """Completion provider used when no OpenAI key is configured."""

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        raise upstream_error("Completion provider is not configured (set OPENAI_API_KEY)")


def build_container(settings: Settings) -> ServiceContainer:
    """Create provider clients and wire them into services."""
    http_client = httpx.AsyncClient(
        timeout=settings.crawl_timeout,
        follow_redirects=True,
        max_redirects=MAX_REDIRECTS,
    )
    tei = TEIClient(
        settings.tei_endpoint,
        dimensions=settings.embedding_dimensions,
        batch_size_limit=settings.embedding_batch_size,
        client=http_client,
    )
    vector_store = VectorStoreManager(
        qdrant_url=settings.qdrant_url,
        collection_name=settings.index_name,
        dimensions=settings.embedding_dimensions,
        api_key=settings.qdrant_api_key,
        batch_size=settings.upsert_batch_size,
        batch_delay=settings.upsert_batch_delay,
    )
    embedder = Embedder(
        tei,
        batch_size=settings.embedding_batch_size,
        batch_delay=settings.embedding_batch_delay,
        content_limit=settings.metadata_content_limit,
        model_name=settings.tei_model_name,
    )

    completion: OpenAICompletionClient | None = None
    if settings.openai_api_key:
        completion = OpenAICompletionClient(
            api_key=settings.openai_api_key,
            model=settings.completion_model,
            base_url=settings.openai_base_url,
        )

    retriever = Retriever(tei, vector_store)
    synthesizer = AnswerSynthesizer(retriever, completion or _MissingCompletion())

    return ServiceContainer(
        settings=settings,
        http_client=http_client,
        vector_store=vector_store,
        ingestion=IngestionService(WebCrawler(client=http_client), embedder, vector_store),
        rag=RAGService(retriever, synthesizer, vector_store),
        completion=completion,
    )
