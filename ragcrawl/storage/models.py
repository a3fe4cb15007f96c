"""Records exchanged between the embedder, the vector store and retrieval."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class VectorRecord:
    """An embedded chunk ready to be stored.

    Args:
        id: Stable string id (<= 512 chars, [a-zA-Z0-9_-])
        values: Embedding vector
        metadata: Chunk payload, including truncated content
    """

    id: str
    values: list[float]
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RankedMatch:
    """A stored record returned by similarity search."""

    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class IndexStats:
    """Best-effort description of a vector index.

    Args:
        index_name: Qdrant collection name
        exists: Whether the collection could be read
        total_vector_count: Points in the collection
        dimension: Configured vector size, None if unknown
        index_fullness: Always 0.0 for Qdrant, which has no capacity ceiling
    """

    index_name: str
    exists: bool
    total_vector_count: int = 0
    dimension: int | None = None
    index_fullness: float = 0.0
