"""Semantic search and answer synthesis."""

from ragcrawl.retrieval.completion import OpenAICompletionClient
from ragcrawl.retrieval.models import RAGAnswer, SearchResult
from ragcrawl.retrieval.retriever import Retriever
from ragcrawl.retrieval.synthesizer import AnswerSynthesizer

__all__ = [
    "AnswerSynthesizer",
    "OpenAICompletionClient",
    "RAGAnswer",
    "Retriever",
    "SearchResult",
]
