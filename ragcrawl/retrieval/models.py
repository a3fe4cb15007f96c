"""Result models for search and answer synthesis."""

from dataclasses import dataclass, field

from ragcrawl.storage.models import RankedMatch


@dataclass(frozen=True)
class SearchResult:
    """Ranked matches for a query.

    Args:
        query: Query text as received
        namespace: Namespace searched
        matches: Matches ordered by descending score (may be empty)
        total_matches: len(matches)
        duration: Seconds spent embedding and searching
    """

    query: str
    namespace: str
    matches: list[RankedMatch] = field(default_factory=list)
    total_matches: int = 0
    duration: float = 0.0


@dataclass(frozen=True)
class RAGAnswer:
    """A synthesized answer with the sources it was built from.

    Args:
        answer: Completion text, citing sources as "(Source N)"
        sources: Matches used as context, in citation order
        confidence: Mean score of sources x 100, clamped to [0, 100]
        namespace: Namespace searched
        query: Query text as received
        duration: Seconds for retrieval plus completion
    """

    answer: str
    sources: list[RankedMatch]
    confidence: float
    namespace: str
    query: str
    duration: float = 0.0
