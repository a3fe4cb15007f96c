"""Qdrant vector store manager for ragcrawl.

An index is a Qdrant collection. Namespaces partition an index: every point
carries a ``namespace`` payload field (keyword-indexed) and every read is
filtered on it. Callers address records by their string vector id, which is
kept in the payload; the Qdrant point id is a UUID derived deterministically
from ``namespace`` and vector id, so re-storing a record overwrites it.

Examples:
    >>> manager = VectorStoreManager(
    ...     qdrant_url="http://localhost:6333",
    ...     collection_name="ragcrawl",
    ... )
    >>> await manager.store(records, namespace="docs")
    >>> matches = await manager.query(vector, namespace="docs", top_k=5)

Notes:
    - Cosine distance is used for similarity search
    - Writes are fail-fast: a failed batch aborts the store, earlier batches
      stay written
"""

import asyncio
import hashlib
import logging
import uuid
from collections import Counter
from typing import Any

import httpx
from qdrant_client import AsyncQdrantClient
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    MatchAny,
    MatchValue,
    PayloadSchemaType,
    PointStruct,
    VectorParams,
)

from ragcrawl.core.errors import upstream_error, validation_error
from ragcrawl.core.metadata import MetadataKeys
from ragcrawl.storage.models import IndexStats, RankedMatch, VectorRecord

logger = logging.getLogger(__name__)

BATCH_SIZE = 100
SCROLL_PAGE_SIZE = 256

# Failures raised by qdrant-client for transport and server errors
QDRANT_ERRORS = (UnexpectedResponse, ResponseHandlingException, httpx.HTTPError, OSError)

# Payload indexes for the fields reads filter on
PAYLOAD_INDEXES: list[tuple[str, PayloadSchemaType]] = [
    (MetadataKeys.NAMESPACE, PayloadSchemaType.KEYWORD),
    (MetadataKeys.URL, PayloadSchemaType.KEYWORD),
    (MetadataKeys.DOMAIN, PayloadSchemaType.KEYWORD),
]


def is_missing_collection(exc: Exception) -> bool:
    """True when Qdrant answered 404 because the collection does not exist."""
    return isinstance(exc, UnexpectedResponse) and exc.status_code == 404


def generate_point_id(namespace: str, vector_id: str) -> str:
    """Generate a deterministic Qdrant point UUID for a namespaced record.

    Args:
        namespace: Namespace the record lives in
        vector_id: Stable string id of the record

    Returns:
        UUID string built from the first 16 bytes of a SHA256 hash
    """
    content = f"{namespace}:{vector_id}"
    hash_bytes = hashlib.sha256(content.encode()).digest()
    return str(uuid.UUID(bytes=hash_bytes[:16]))


def build_filter(namespace: str, metadata_filter: dict[str, Any] | None = None) -> Filter:
    """Build a Qdrant filter scoping a read to a namespace.

    Scalar filter values match exactly; list values match any element.
    """
    conditions = [
        FieldCondition(key=MetadataKeys.NAMESPACE, match=MatchValue(value=namespace))
    ]
    for key, value in (metadata_filter or {}).items():
        if isinstance(value, (list, tuple)):
            conditions.append(FieldCondition(key=key, match=MatchAny(any=list(value))))
        else:
            conditions.append(FieldCondition(key=key, match=MatchValue(value=value)))
    return Filter(must=conditions)


class VectorStoreManager:
    """Manages Qdrant storage and similarity search for vector records.

    Attributes:
        collection_name: Default index (Qdrant collection)
        dimensions: Vector size used when creating collections
        batch_size: Records per upsert request
        batch_delay: Seconds to wait between upsert requests
        client: AsyncQdrantClient instance

    Example:
        >>> client = AsyncQdrantClient(url="http://localhost:6333")
        >>> manager = VectorStoreManager(client=client, collection_name="ragcrawl")
    """

    def __init__(
        self,
        qdrant_url: str | None = None,
        collection_name: str = "ragcrawl",
        dimensions: int = 1024,
        api_key: str | None = None,
        batch_size: int = BATCH_SIZE,
        batch_delay: float = 0.5,
        client: AsyncQdrantClient | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            qdrant_url: Qdrant server URL, used when no client is given
            collection_name: Default index name
            dimensions: Vector size for newly created collections
            api_key: Optional Qdrant API key, used when no client is given
            batch_size: Records per upsert request
            batch_delay: Seconds to wait between upsert requests
            client: Pre-built AsyncQdrantClient

        Raises:
            ValueError: If neither qdrant_url nor client is provided
        """
        if client is None and not qdrant_url:
            raise ValueError("Either qdrant_url or client must be provided")

        self.collection_name = collection_name
        self.dimensions = dimensions
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.client = client or AsyncQdrantClient(url=qdrant_url, api_key=api_key)
        self._ready: set[str] = set()

    async def close(self) -> None:
        await self.client.close()

    async def validate_services(self) -> None:
        """Check that Qdrant answers a collection listing.

        Raises:
            ValueError: If the health check fails
        """
        try:
            await self.client.get_collections()
        except QDRANT_ERRORS as exc:
            msg = f"Qdrant health check failed: {exc}"
            raise ValueError(msg) from exc

    async def ensure_collection(self, index: str | None = None) -> None:
        """Create the collection and its payload indexes if missing (idempotent).

        Raises:
            RagCrawlError: UPSTREAM if Qdrant cannot be reached
        """
        collection = index or self.collection_name
        if collection in self._ready:
            return

        try:
            if not await self.client.collection_exists(collection):
                logger.info("Creating collection %s (%d dims)", collection, self.dimensions)
                await self.client.create_collection(
                    collection_name=collection,
                    vectors_config=VectorParams(
                        size=self.dimensions, distance=Distance.COSINE
                    ),
                )
            await self._ensure_payload_indexes(collection)
        except QDRANT_ERRORS as exc:
            raise upstream_error("Failed to prepare vector index", exc) from exc

        self._ready.add(collection)

    async def _ensure_payload_indexes(self, collection: str) -> None:
        for field_name, schema_type in PAYLOAD_INDEXES:
            try:
                await self.client.create_payload_index(
                    collection_name=collection,
                    field_name=field_name,
                    field_schema=schema_type,
                )
            except UnexpectedResponse as e:
                if "already exists" in str(e).lower():
                    continue
                raise

    def _validate_record(self, position: int, record: VectorRecord) -> None:
        fields: list[str] = []
        if not record.id:
            fields.append(f"records[{position}].id")
        if not record.values:
            fields.append(f"records[{position}].values")
        if fields:
            raise validation_error(
                f"Invalid vector record at position {position}", fields
            )

    async def store(
        self,
        records: list[VectorRecord],
        namespace: str,
        index: str | None = None,
    ) -> int:
        """Upsert records into a namespace of an index.

        All records are validated before anything is sent. Upserts go out in
        batches of ``batch_size`` with ``batch_delay`` between them.

        Args:
            records: Records to store
            namespace: Target namespace
            index: Target collection, defaults to ``collection_name``

        Returns:
            Number of records stored

        Raises:
            RagCrawlError: VALIDATION naming the offending fields of an invalid
                record, UPSTREAM if an upsert fails
        """
        for position, record in enumerate(records):
            self._validate_record(position, record)

        if not records:
            return 0

        collection = index or self.collection_name
        await self.ensure_collection(collection)

        points = [
            PointStruct(
                id=generate_point_id(namespace, record.id),
                vector=record.values,
                payload={
                    **record.metadata,
                    MetadataKeys.VECTOR_ID: record.id,
                    MetadataKeys.NAMESPACE: namespace,
                },
            )
            for record in records
        ]

        total_batches = (len(points) + self.batch_size - 1) // self.batch_size
        for batch_number, start in enumerate(range(0, len(points), self.batch_size), 1):
            batch = points[start : start + self.batch_size]
            try:
                await self.client.upsert(collection_name=collection, points=batch, wait=True)
            except QDRANT_ERRORS as exc:
                logger.error(
                    "Upsert batch %d/%d to %s failed: %s",
                    batch_number,
                    total_batches,
                    collection,
                    exc,
                )
                raise upstream_error("Failed to store vectors", exc) from exc

            logger.debug("Upserted batch %d/%d (%d points)", batch_number, total_batches, len(batch))
            if batch_number < total_batches and self.batch_delay > 0:
                await asyncio.sleep(self.batch_delay)

        logger.info("Stored %d vectors in %s/%s", len(points), collection, namespace)
        return len(points)

    async def query(
        self,
        vector: list[float],
        namespace: str,
        top_k: int = 5,
        metadata_filter: dict[str, Any] | None = None,
        index: str | None = None,
    ) -> list[RankedMatch] | None:
        """Similarity search within a namespace.

        Returns:
            Matches ordered by descending score, or None when Qdrant returned
            no result list at all. A collection that does not exist yet has
            no matches.

        Raises:
            RagCrawlError: UPSTREAM if the search fails
        """
        collection = index or self.collection_name
        try:
            response = await self.client.query_points(
                collection_name=collection,
                query=vector,
                query_filter=build_filter(namespace, metadata_filter),
                limit=top_k,
                with_payload=True,
            )
        except QDRANT_ERRORS as exc:
            if is_missing_collection(exc):
                logger.debug("Collection %s does not exist, no matches", collection)
                return []
            raise upstream_error("Vector search failed", exc) from exc

        if response is None or response.points is None:
            return None

        return [
            RankedMatch(
                id=str((point.payload or {}).get(MetadataKeys.VECTOR_ID, point.id)),
                score=point.score,
                metadata=dict(point.payload or {}),
            )
            for point in response.points
        ]

    async def count_namespace(self, namespace: str, index: str | None = None) -> int:
        collection = index or self.collection_name
        try:
            result = await self.client.count(
                collection_name=collection,
                count_filter=build_filter(namespace),
                exact=True,
            )
        except QDRANT_ERRORS as exc:
            if is_missing_collection(exc):
                return 0
            raise upstream_error("Failed to count vectors", exc) from exc
        return result.count

    async def namespace_counts(self, index: str | None = None) -> dict[str, int]:
        """Count points per namespace by scrolling namespace payloads.

        Raises:
            RagCrawlError: UPSTREAM if the scroll fails
        """
        collection = index or self.collection_name
        counts: Counter[str] = Counter()
        offset = None

        try:
            while True:
                points, offset = await self.client.scroll(
                    collection_name=collection,
                    limit=SCROLL_PAGE_SIZE,
                    offset=offset,
                    with_payload=[MetadataKeys.NAMESPACE],
                    with_vectors=False,
                )
                for point in points:
                    namespace = (point.payload or {}).get(MetadataKeys.NAMESPACE)
                    if namespace:
                        counts[namespace] += 1
                if offset is None:
                    break
        except QDRANT_ERRORS as exc:
            raise upstream_error("Failed to list namespaces", exc) from exc

        return dict(counts)

    async def stats(self, index: str | None = None) -> IndexStats:
        """Describe an index. Never raises; unreadable indexes report exists=False."""
        collection = index or self.collection_name
        try:
            info = await self.client.get_collection(collection)
        except QDRANT_ERRORS as exc:
            logger.warning("Could not read stats for %s: %s", collection, exc)
            return IndexStats(index_name=collection, exists=False)

        vectors = info.config.params.vectors
        dimension = getattr(vectors, "size", None)
        return IndexStats(
            index_name=collection,
            exists=True,
            total_vector_count=info.points_count or 0,
            dimension=dimension,
        )
