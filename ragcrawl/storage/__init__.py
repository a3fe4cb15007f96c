"""Embedding generation and vector storage."""

from ragcrawl.storage.embedder import Embedder, generate_vector_id
from ragcrawl.storage.embeddings import TEIClient
from ragcrawl.storage.models import IndexStats, RankedMatch, VectorRecord
from ragcrawl.storage.qdrant import VectorStoreManager

__all__ = [
    "Embedder",
    "IndexStats",
    "RankedMatch",
    "TEIClient",
    "VectorRecord",
    "VectorStoreManager",
    "generate_vector_id",
]
