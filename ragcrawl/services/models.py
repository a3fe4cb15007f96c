"""Service-layer data models for ingestion and knowledge-base statistics."""

from dataclasses import dataclass, field
from datetime import datetime

from ragcrawl.crawler.models import CrawlRequest, CrawlSummary


@dataclass(frozen=True)
class VectorizeRequest:
    """A crawl plus the parameters for indexing its pages.

    Args:
        crawl: Crawl parameters
        index_name: Target index (Qdrant collection)
        namespace: Target namespace within the index
        chunk_size: Tokens per chunk window
        chunk_overlap: Tokens shared by consecutive windows
    """

    crawl: CrawlRequest
    index_name: str
    namespace: str
    chunk_size: int = 1000
    chunk_overlap: int = 200


@dataclass(frozen=True)
class EmbeddingInfo:
    model: str
    dimensions: int
    total_tokens: int


@dataclass(frozen=True)
class VectorStoreResult:
    """Outcome of a vectorize run.

    Args:
        index_name: Index written to
        namespace: Namespace written to
        vectors_stored: Records upserted
        total_chunks: Chunks produced from the crawl
        crawl_summary: Summary of the underlying crawl, errors included
        duration: Seconds for the whole pipeline
        embeddings: Model, dimension and token totals
    """

    index_name: str
    namespace: str
    vectors_stored: int
    total_chunks: int
    crawl_summary: CrawlSummary
    duration: float
    embeddings: EmbeddingInfo


@dataclass(frozen=True)
class NamespaceStats:
    namespace: str
    vector_count: int
    index_fullness: float = 0.0
    total_vector_count: int = 0


@dataclass(frozen=True)
class NamespaceList:
    index_name: str
    namespaces: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class VectorizePreview:
    """Chunk and token estimate for a vectorize run, computed without embedding.

    Args:
        index_name: Index the run would write to
        namespace: Namespace the run would write to
        chunk_size: Tokens per chunk window
        chunk_overlap: Tokens shared by consecutive windows
        total_pages: Pages the crawl returned
        estimated_vectors: Chunks the pages produce, one vector each
        estimated_tokens: Sum of chunk word counts
        crawl_summary: Summary of the crawl that was run
    """

    index_name: str
    namespace: str
    chunk_size: int
    chunk_overlap: int
    total_pages: int
    estimated_vectors: int
    estimated_tokens: int
    crawl_summary: CrawlSummary


@dataclass(frozen=True)
class PageSummary:
    url: str
    title: str
    word_count: int


@dataclass(frozen=True)
class SampleChunk:
    content: str
    word_count: int
    chunk_index: int
    total_chunks: int
    section: str | None = None


@dataclass(frozen=True)
class VectorizeDryRun:
    """Chunking of a single page, reported without embedding or storing it."""

    page: PageSummary
    total_chunks: int
    estimated_vectors: int
    estimated_tokens: int
    sample_chunk: SampleChunk | None = None


@dataclass(frozen=True)
class HealthReport:
    """Reachability of the providers behind retrieval.

    Args:
        status: "healthy" when every provider answered, else "unhealthy"
        services: Provider name to "operational" or "error"
        namespace_count: Namespaces in the default index, when Qdrant answered
        duration: Seconds spent checking
        errors: One message per failed provider
        checked_at: When the check ran (UTC)
    """

    status: str
    services: dict[str, str]
    duration: float
    checked_at: datetime
    namespace_count: int | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def healthy(self) -> bool:
        return self.status == "healthy"
