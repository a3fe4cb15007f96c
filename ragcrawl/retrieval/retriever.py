"""Semantic search over a namespace."""

import logging
import time
from typing import Any

import httpx

from ragcrawl.core.errors import not_found, upstream_error
from ragcrawl.core.interfaces import EmbeddingProvider
from ragcrawl.core.validation import validate_namespace, validate_query, validate_top_k
from ragcrawl.retrieval.models import SearchResult
from ragcrawl.storage.qdrant import VectorStoreManager

logger = logging.getLogger(__name__)


class Retriever:
    """Embeds a query and returns the nearest stored chunks.

    Args:
        embeddings: Provider used to embed the query text
        vector_store: Store holding the namespace
    """

    def __init__(
        self, embeddings: EmbeddingProvider, vector_store: VectorStoreManager
    ) -> None:
        self.embeddings = embeddings
        self.vector_store = vector_store

    async def search(
        self,
        query: str,
        namespace: str,
        top_k: int = 5,
        metadata_filter: dict[str, Any] | None = None,
        index: str | None = None,
    ) -> SearchResult:
        """Return up to top_k matches ordered by descending score.

        An empty match list is a valid result.

        Raises:
            RagCrawlError: VALIDATION for bad input, UPSTREAM when a provider
                fails, NOT_FOUND when the store returns no result list at all
        """
        validate_query(query)
        validate_namespace(namespace)
        validate_top_k(top_k)

        start_time = time.monotonic()
        try:
            vector = await self.embeddings.embed_single(query)
        except (httpx.HTTPError, ValueError) as exc:
            raise upstream_error("Failed to embed query", exc) from exc

        matches = await self.vector_store.query(
            vector,
            namespace=namespace,
            top_k=top_k,
            metadata_filter=metadata_filter,
            index=index,
        )
        if matches is None:
            raise not_found("No matches returned from vector search")

        duration = time.monotonic() - start_time
        logger.info(
            "Search in %s returned %d matches in %.2fs", namespace, len(matches), duration
        )
        return SearchResult(
            query=query,
            namespace=namespace,
            matches=matches,
            total_matches=len(matches),
            duration=duration,
        )
