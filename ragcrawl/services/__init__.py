"""Service layer orchestrating crawl, ingestion and retrieval."""

from ragcrawl.services.container import ServiceContainer, build_container
from ragcrawl.services.ingestion import IngestionService
from ragcrawl.services.models import (
    EmbeddingInfo,
    NamespaceList,
    NamespaceStats,
    VectorizeRequest,
    VectorStoreResult,
)
from ragcrawl.services.rag import RAGService

__all__ = [
    "EmbeddingInfo",
    "IngestionService",
    "NamespaceList",
    "NamespaceStats",
    "RAGService",
    "ServiceContainer",
    "VectorStoreResult",
    "VectorizeRequest",
    "build_container",
]
