"""Request models for API endpoints.

Bodies use camelCase field names on the wire (``maxDepth``, ``topK``) and
snake_case attributes in Python. Ranges are enforced here; the core receives
plain dataclasses.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ragcrawl.core.validation import INDEX_NAME_PATTERN, NAMESPACE_PATTERN


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CrawlBody(CamelModel):
    """Crawl request body.

    Attributes:
        url: Seed URL
        max_depth: 1-10
        max_pages: 1-1000
        delay: Politeness delay in milliseconds, 100-10000
        include_patterns: Substrings a followed link must contain
        exclude_patterns: Substrings that block a link (defaults when omitted)
        follow_external_links: Consider links to other hosts
    """

    url: str = Field(min_length=1)
    max_depth: int = Field(3, ge=1, le=10)
    max_pages: int = Field(50, ge=1, le=1000)
    delay: int = Field(1000, ge=100, le=10000)
    include_patterns: list[str] = Field(default_factory=list)
    exclude_patterns: list[str] | None = None
    follow_external_links: bool = False


class AnalyzeBody(CamelModel):
    url: str = Field(min_length=1)


def _check_window(chunk_size: int | None, chunk_overlap: int | None) -> None:
    if chunk_size is None or chunk_overlap is None:
        return
    if chunk_overlap >= chunk_size:
        raise ValueError("chunkOverlap must be smaller than chunkSize")


class VectorizeBody(CrawlBody):
    index_name: str = Field(min_length=1, max_length=45, pattern=INDEX_NAME_PATTERN.pattern)
    namespace: str | None = Field(
        None, min_length=1, max_length=100, pattern=NAMESPACE_PATTERN.pattern
    )
    chunk_size: int | None = Field(None, ge=100, le=8000)
    chunk_overlap: int | None = Field(None, ge=0, le=500)

    @model_validator(mode="after")
    def check_overlap(self) -> "VectorizeBody":
        _check_window(self.chunk_size, self.chunk_overlap)
        return self


class DryRunBody(AnalyzeBody):
    """Single-page chunking dry run; smaller windows than a real run."""

    chunk_size: int = Field(500, ge=100, le=8000)
    chunk_overlap: int = Field(50, ge=0, le=500)

    @model_validator(mode="after")
    def check_overlap(self) -> "DryRunBody":
        _check_window(self.chunk_size, self.chunk_overlap)
        return self


class SearchBody(CamelModel):
    query: str = Field(min_length=1, max_length=1000)
    namespace: str | None = Field(
        None, min_length=1, max_length=100, pattern=NAMESPACE_PATTERN.pattern
    )
    top_k: int = Field(5, ge=1, le=20)
    filter_: dict[str, Any] | None = Field(None, alias="filter")


class QueryBody(SearchBody):
    include_metadata: bool = True
