"""Query-side service over the knowledge base."""

import logging
import time
from datetime import datetime, timezone
from typing import Any

from ragcrawl.core.errors import RagCrawlError, not_found
from ragcrawl.core.validation import validate_index_name, validate_namespace
from ragcrawl.retrieval.models import RAGAnswer, SearchResult
from ragcrawl.retrieval.retriever import Retriever
from ragcrawl.retrieval.synthesizer import AnswerSynthesizer
from ragcrawl.services.models import HealthReport, NamespaceList, NamespaceStats
from ragcrawl.storage.models import IndexStats
from ragcrawl.storage.qdrant import VectorStoreManager

logger = logging.getLogger(__name__)


class RAGService:
    """Search, answer and statistics for an index.

    Args:
        retriever: Semantic search
        synthesizer: Answer synthesis
        vector_store: Store used for statistics
    """

    def __init__(
        self,
        retriever: Retriever,
        synthesizer: AnswerSynthesizer,
        vector_store: VectorStoreManager,
    ) -> None:
        self.retriever = retriever
        self.synthesizer = synthesizer
        self.vector_store = vector_store

    async def search(
        self,
        query: str,
        namespace: str,
        top_k: int = 5,
        metadata_filter: dict[str, Any] | None = None,
    ) -> SearchResult:
        return await self.retriever.search(
            query, namespace, top_k=top_k, metadata_filter=metadata_filter
        )

    async def answer(
        self,
        query: str,
        namespace: str,
        top_k: int = 5,
        metadata_filter: dict[str, Any] | None = None,
    ) -> RAGAnswer:
        return await self.synthesizer.answer(
            query, namespace, top_k=top_k, metadata_filter=metadata_filter
        )

    async def namespace_stats(self, namespace: str) -> NamespaceStats:
        """Vector counts for a namespace.

        Raises:
            RagCrawlError: NOT_FOUND if the namespace holds no vectors or the
                index does not exist, UPSTREAM if Qdrant fails
        """
        validate_namespace(namespace)

        index = await self.vector_store.stats()
        if not index.exists:
            raise not_found(f"Namespace '{namespace}' not found")

        count = await self.vector_store.count_namespace(namespace)
        if count == 0:
            raise not_found(f"Namespace '{namespace}' not found")

        return NamespaceStats(
            namespace=namespace,
            vector_count=count,
            index_fullness=index.index_fullness,
            total_vector_count=index.total_vector_count,
        )

    async def list_namespaces(self) -> NamespaceList:
        index = await self.vector_store.stats()
        if not index.exists:
            return NamespaceList(index_name=index.index_name)
        counts = await self.vector_store.namespace_counts()
        return NamespaceList(index_name=index.index_name, namespaces=sorted(counts))

    async def index_stats(self, index_name: str) -> IndexStats:
        validate_index_name(index_name)
        return await self.vector_store.stats(index_name)

    async def check_health(self) -> HealthReport:
        """Check Qdrant and the embedding server. Never raises."""
        start_time = time.monotonic()
        services: dict[str, str] = {}
        errors: list[str] = []
        namespace_count = None

        try:
            await self.vector_store.validate_services()
            namespace_count = len((await self.list_namespaces()).namespaces)
            services["qdrant"] = "operational"
        except (ValueError, RagCrawlError) as exc:
            services["qdrant"] = "error"
            errors.append(str(exc))

        try:
            await self.retriever.embeddings.validate_services()
            services["embeddings"] = "operational"
        except ValueError as exc:
            services["embeddings"] = "error"
            errors.append(str(exc))

        report = HealthReport(
            status="unhealthy" if errors else "healthy",
            services=services,
            duration=time.monotonic() - start_time,
            checked_at=datetime.now(timezone.utc),
            namespace_count=namespace_count,
            errors=errors,
        )
        if errors:
            logger.error("Health check failed: %s", "; ".join(errors))
        else:
            logger.info("Health check passed (%d namespaces)", namespace_count or 0)
        return report
