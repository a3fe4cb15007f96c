"""Data models for web crawling operations."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

DEFAULT_USER_AGENT = "ragcrawl/0.1 (+https://github.com/ragcrawl/ragcrawl)"

# Applied when a request does not name its own exclude patterns
DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "/search?",
    "/404",
    "/login",
    "/register",
    "/admin",
    ".pdf",
    ".doc",
    ".docx",
    ".xls",
    ".xlsx",
    ".ppt",
    ".pptx",
    ".zip",
    ".rar",
    ".tar",
    ".gz",
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".svg",
    ".ico",
    ".css",
    ".js",
    ".woff",
    ".woff2",
    ".ttf",
    ".eot",
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CrawlRequest:
    """Parameters for a single crawl.

    Args:
        url: Seed URL
        max_depth: Deepest link level to fetch (seed is depth 0)
        max_pages: Page budget for the whole crawl
        delay_ms: Politeness delay in milliseconds
        include_patterns: Substrings a link must contain (any) to be followed
        exclude_patterns: Substrings that block a link; None uses the defaults
        follow_external_links: Consider links to other hosts
        allowed_domains: Hostnames that may be fetched; empty means seed host
        max_concurrent: Pages fetched concurrently per batch
        timeout: Per-request timeout in seconds
        user_agent: User-Agent header sent with every request
    """

    url: str
    max_depth: int = 3
    max_pages: int = 50
    delay_ms: int = 1000
    include_patterns: list[str] = field(default_factory=list)
    exclude_patterns: list[str] | None = None
    follow_external_links: bool = False
    allowed_domains: list[str] = field(default_factory=list)
    max_concurrent: int = 3
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def effective_exclude_patterns(self) -> list[str]:
        if self.exclude_patterns is None:
            return list(DEFAULT_EXCLUDE_PATTERNS)
        return list(self.exclude_patterns)


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    id: str | None = None


@dataclass(frozen=True)
class PageImage:
    src: str
    alt: str | None = None
    title: str | None = None


@dataclass(frozen=True)
class PageLinks:
    internal: list[str] = field(default_factory=list)
    external: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PageMetadata:
    """Structured metadata extracted from a page.

    Args:
        description: Meta description (or og:description)
        keywords: Meta keywords split on commas
        author: Meta author (or article:author)
        publish_date: Publication date from meta tags or a time element
        last_modified: Modification date from meta tags
        canonical: Canonical link href
        language: Document language, "en" when undeclared
        content_type: Always "text/html" for extracted pages
        word_count: Whitespace tokens in the main content
        headings: Headings in document order
        links: Deduplicated internal and external absolute links
        images: Images with absolute src
    """

    description: str = ""
    keywords: list[str] = field(default_factory=list)
    author: str = ""
    publish_date: str = ""
    last_modified: str = ""
    canonical: str = ""
    language: str = "en"
    content_type: str = "text/html"
    word_count: int = 0
    headings: list[Heading] = field(default_factory=list)
    links: PageLinks = field(default_factory=PageLinks)
    images: list[PageImage] = field(default_factory=list)


@dataclass(frozen=True)
class Page:
    """A crawled page.

    Args:
        url: URL the page was requested from
        title: Page title ("Untitled" if none found)
        content: Main content text
        metadata: Extracted page metadata
        status: HTTP status code of the response
        depth: Link distance from the seed
        crawled_at: When the page was extracted (UTC)
    """

    url: str
    title: str
    content: str
    metadata: PageMetadata
    status: int
    depth: int
    crawled_at: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True)
class CrawlError:
    """A page that could not be fetched."""

    url: str
    error: str
    status: int | None = None


@dataclass(frozen=True)
class CrawlSummary:
    """Aggregate statistics for a finished crawl.

    Args:
        total_pages: Pages collected
        total_words: Sum of page word counts
        max_depth_reached: Deepest page depth collected (0 when empty)
        duration: Wall-clock seconds
        unique_domains: Sorted distinct hostnames of collected pages
        errors: Per-page failures, in the order they were observed
    """

    total_pages: int
    total_words: int
    max_depth_reached: int
    duration: float
    unique_domains: list[str] = field(default_factory=list)
    errors: list[CrawlError] = field(default_factory=list)


@dataclass(frozen=True)
class CrawlResult:
    pages: list[Page]
    summary: CrawlSummary


@dataclass(frozen=True)
class CrawlPreview:
    """What a crawl would do, computed without fetching anything.

    Args:
        starting_url: Normalized seed URL
        allowed_domains: Domains the crawl would stay within
        estimated_pages: min(10 ** max_depth, max_pages)
        config: Effective crawl parameters
    """

    starting_url: str
    allowed_domains: list[str]
    estimated_pages: int
    config: dict[str, Any]
