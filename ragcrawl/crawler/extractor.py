"""HTML page extraction.

Turns raw markup into a ``Page`` record: title and meta tags, main content
text, headings, links and images. Extraction is a pure function of its inputs.
"""

import logging
from collections.abc import Callable
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Comment, Tag

from ragcrawl.crawler.models import Heading, Page, PageImage, PageLinks, PageMetadata

logger = logging.getLogger(__name__)

# Regions that never hold main content
BOILERPLATE_SELECTORS = (
    "script, style, nav, footer, aside, "
    ".nav, .navigation, .sidebar, .footer, .header"
)

# Tried in order after <main> and <article>
CONTENT_SELECTORS = (
    ".content, .main-content, .post-content, .entry-content, #content, #main"
)

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


def _attr(element: Tag | None, name: str) -> str:
    if element is None:
        return ""
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def _first_meta(soup: BeautifulSoup, *selectors: str) -> str:
    """Return the content of the first matching meta tag with a value."""
    for selector in selectors:
        value = _attr(soup.select_one(selector), "content")
        if value:
            return value
    return ""


def _resolve(base_url: str, href: str) -> str | None:
    """Resolve href against base_url, or None if it is not a usable http(s) URL."""
    try:
        absolute = urljoin(base_url, href.strip())
        parsed = urlparse(absolute)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return None
    return absolute


class PageExtractor:
    """Extracts structured page data from HTML.

    Args:
        soup_factory: Builds a BeautifulSoup tree from markup. Defaults to the
            stdlib-backed ``html.parser``.

    Example:
        >>> extractor = PageExtractor()
        >>> page = extractor.extract("<title>Docs</title>", "https://example.com", 0, 200)
        >>> page.title
        'Docs'
    """

    def __init__(
        self,
        soup_factory: Callable[[str], BeautifulSoup] | None = None,
    ) -> None:
        self._soup_factory = soup_factory or (
            lambda html: BeautifulSoup(html, "html.parser")
        )

    def extract(self, raw_markup: str, url: str, depth: int, status: int) -> Page:
        """Build a Page from raw markup.

        Args:
            raw_markup: HTML document
            url: URL the document was fetched from (base for relative links)
            depth: Crawl depth of the page
            status: HTTP status code of the response

        Returns:
            Immutable Page record
        """
        soup = self._soup_factory(raw_markup)

        title = self._extract_title(soup)
        keywords_raw = _first_meta(soup, 'meta[name="keywords"]')
        keywords = [k.strip() for k in keywords_raw.split(",") if k.strip()]

        description = _first_meta(
            soup, 'meta[name="description"]', 'meta[property="og:description"]'
        )
        author = _first_meta(
            soup, 'meta[name="author"]', 'meta[property="article:author"]'
        )
        publish_date = _first_meta(
            soup, 'meta[property="article:published_time"]', 'meta[name="date"]'
        ) or _attr(soup.select_one("time[datetime]"), "datetime")
        last_modified = _first_meta(
            soup,
            'meta[property="article:modified_time"]',
            'meta[name="last-modified"]',
        )
        canonical = _attr(soup.select_one('link[rel="canonical"]'), "href")
        language = (
            _attr(soup.find("html"), "lang")
            or _first_meta(soup, 'meta[http-equiv="content-language"]')
            or "en"
        )

        self._strip_boilerplate(soup)

        content_root = self._select_content_root(soup)
        content = content_root.get_text(separator=" ", strip=True)
        word_count = len(content.split())

        metadata = PageMetadata(
            description=description,
            keywords=keywords,
            author=author,
            publish_date=publish_date,
            last_modified=last_modified,
            canonical=canonical,
            language=language,
            word_count=word_count,
            headings=self._extract_headings(soup),
            links=self._extract_links(soup, url),
            images=self._extract_images(soup, url),
        )

        return Page(
            url=url,
            title=title,
            content=content,
            metadata=metadata,
            status=status,
            depth=depth,
        )

    def _extract_title(self, soup: BeautifulSoup) -> str:
        for tag_name in ("title", "h1"):
            element = soup.find(tag_name)
            if element is not None:
                text = element.get_text(strip=True)
                if text:
                    return text
        return "Untitled"

    def _strip_boilerplate(self, soup: BeautifulSoup) -> None:
        for element in soup.select(BOILERPLATE_SELECTORS):
            element.decompose()
        for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
            comment.extract()

    def _select_content_root(self, soup: BeautifulSoup) -> Tag | BeautifulSoup:
        """Pick the main content region.

        Fallback chain: <main>, <article>, common content selectors, <body>,
        then the whole document.
        """
        for candidate in (
            soup.find("main"),
            soup.find("article"),
            soup.select_one(CONTENT_SELECTORS),
            soup.find("body"),
        ):
            if candidate is not None:
                return candidate
        return soup

    def _extract_headings(self, soup: BeautifulSoup) -> list[Heading]:
        headings: list[Heading] = []
        for element in soup.find_all(HEADING_TAGS):
            text = element.get_text(strip=True)
            if not text:
                continue
            heading_id = _attr(element, "id") or None
            headings.append(
                Heading(level=int(element.name[1]), text=text, id=heading_id)
            )
        return headings

    def _extract_links(self, soup: BeautifulSoup, page_url: str) -> PageLinks:
        page_host = urlparse(page_url).hostname
        internal: list[str] = []
        external: list[str] = []

        for anchor in soup.find_all("a", href=True):
            absolute = _resolve(page_url, _attr(anchor, "href"))
            if absolute is None:
                logger.debug("Skipping unusable href on %s", page_url)
                continue
            if urlparse(absolute).hostname == page_host:
                internal.append(absolute)
            else:
                external.append(absolute)

        return PageLinks(
            internal=list(dict.fromkeys(internal)),
            external=list(dict.fromkeys(external)),
        )

    def _extract_images(self, soup: BeautifulSoup, page_url: str) -> list[PageImage]:
        images: list[PageImage] = []
        for img in soup.find_all("img", src=True):
            src = _resolve(page_url, _attr(img, "src"))
            if src is None:
                continue
            images.append(
                PageImage(
                    src=src,
                    alt=_attr(img, "alt") or None,
                    title=_attr(img, "title") or None,
                )
            )
        return images
