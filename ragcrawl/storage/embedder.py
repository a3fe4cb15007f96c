"""Turn text chunks into vector records.

Chunks are embedded in fixed-size batches with a pause between requests.
Embedding is fail-fast: the first failed batch aborts the run and no records
are returned, so nothing partial reaches the vector store.
"""

import asyncio
import hashlib
import logging
import re
from urllib.parse import urlparse

import httpx

from ragcrawl.core.errors import upstream_error
from ragcrawl.core.interfaces import EmbeddingProvider
from ragcrawl.core.metadata import MetadataKeys
from ragcrawl.processing.chunker import TextChunk
from ragcrawl.storage.models import VectorRecord

logger = logging.getLogger(__name__)

MAX_VECTOR_ID_LENGTH = 512
_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def generate_vector_id(url: str, chunk_index: int) -> str:
    """Build a stable record id for a chunk.

    The id is ``{host}{path}_chunk_{index}_{suffix}`` with every character
    outside ``[a-zA-Z0-9_-]`` replaced by ``_``. The suffix is a short hash of
    the full URL, which keeps pages that differ only by query string apart and
    makes re-ingesting the same page overwrite its previous records.

    Args:
        url: Page URL
        chunk_index: Position of the chunk in the page

    Returns:
        Id of at most 512 characters
    """
    parsed = urlparse(url)
    host = _UNSAFE_ID_CHARS.sub("_", parsed.hostname or "")
    path = _UNSAFE_ID_CHARS.sub("_", parsed.path or "")
    suffix = hashlib.sha256(url.encode()).hexdigest()[:8]

    tail = f"_chunk_{chunk_index}_{suffix}"
    base = f"{host}{path}"[: MAX_VECTOR_ID_LENGTH - len(tail)]
    return f"{base}{tail}"


class Embedder:
    """Embeds chunks through an ``EmbeddingProvider``.

    Args:
        provider: Embedding provider (e.g. ``TEIClient``)
        batch_size: Chunks per provider call
        batch_delay: Seconds to wait between provider calls
        content_limit: Characters of chunk text copied into the payload
        model_name: Default model name recorded on each record
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        batch_size: int = 100,
        batch_delay: float = 1.0,
        content_limit: int = 40000,
        model_name: str = "",
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.provider = provider
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.content_limit = content_limit
        self.model_name = model_name

    async def embed(
        self, chunks: list[TextChunk], model: str | None = None
    ) -> list[VectorRecord]:
        """Embed chunks into vector records, in chunk order.

        Args:
            chunks: Chunks to embed
            model: Model name recorded in each record's metadata; the provider
                decides which model actually runs

        Returns:
            One record per valid chunk

        Raises:
            RagCrawlError: UPSTREAM if any provider call fails
        """
        model_name = model or self.model_name
        records: list[VectorRecord] = []
        total_batches = (len(chunks) + self.batch_size - 1) // self.batch_size

        for batch_number, start in enumerate(range(0, len(chunks), self.batch_size), 1):
            batch = chunks[start : start + self.batch_size]
            logger.debug(
                "Embedding batch %d/%d (%d chunks)", batch_number, total_batches, len(batch)
            )

            try:
                vectors = await self.provider.embed_batch([c.content for c in batch])
            except (httpx.HTTPError, ValueError) as exc:
                logger.error("Embedding batch %d/%d failed: %s", batch_number, total_batches, exc)
                raise upstream_error("Failed to generate embeddings", exc) from exc

            for chunk, values in zip(batch, vectors):
                record = self._build_record(chunk, values, model_name)
                if record is not None:
                    records.append(record)

            if batch_number < total_batches and self.batch_delay > 0:
                await asyncio.sleep(self.batch_delay)

        logger.info("Embedded %d chunks into %d records", len(chunks), len(records))
        return records

    def _build_record(
        self, chunk: TextChunk, values: list[float], model_name: str
    ) -> VectorRecord | None:
        url = chunk.metadata.get(MetadataKeys.URL, "")
        chunk_index = chunk.metadata.get(MetadataKeys.CHUNK_INDEX, 0)
        vector_id = generate_vector_id(url, chunk_index)

        if not vector_id or len(vector_id) > MAX_VECTOR_ID_LENGTH:
            logger.warning("Skipping chunk %d of %s: invalid vector id", chunk_index, url)
            return None

        expected = self.provider.expected_dimensions
        if len(values) != expected:
            logger.warning(
                "Embedding for %s has %d dimensions, expected %d",
                vector_id,
                len(values),
                expected,
            )

        metadata = dict(chunk.metadata)
        metadata[MetadataKeys.CONTENT] = chunk.content[: self.content_limit]
        if model_name:
            metadata[MetadataKeys.EMBEDDING_MODEL] = model_name

        return VectorRecord(id=vector_id, values=list(values), metadata=metadata)
