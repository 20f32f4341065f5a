"""Search result extraction from upstream result pages.

Upstream markup drifts, so each provider describes its page as ordered
lists of candidate CSS selectors. The first result selector that yields an
accepted result wins; later selectors are never mixed in.
"""

from dataclasses import dataclass
from typing import Callable
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError

from websearch.exceptions import ParseError
from websearch.extraction.text import (
    STOP_WORDS,
    create_summary,
    extract_keywords,
    normalize_whitespace,
)
from websearch.logging import get_logger
from websearch.models import MAX_RESULT_KEYWORDS, SearchResult

logger = get_logger("websearch.extraction.results")

UrlFilter = Callable[[str], str | None]


@dataclass(frozen=True)
class SelectorSet:
    """Candidate selectors describing one upstream's result page."""

    result_selectors: tuple[str, ...]
    title_selectors: tuple[str, ...]
    snippet_selectors: tuple[str, ...]
    base_url: str
    min_url_length: int = 10


def resolve_url(href: str, base_url: str) -> str | None:
    """Resolve a result link against the upstream origin.

    Args:
        href: Raw href attribute
        base_url: Upstream origin, e.g. 'https://search.brave.com'

    Returns:
        str | None: Absolute http(s) URL, or None if the link is unusable
    """
    href = href.strip()
    if not href:
        return None
    try:
        url = urljoin(base_url, href)
        parsed = urlparse(url)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return url


def _first_match(block: Tag, selectors: tuple[str, ...]) -> Tag | None:
    for selector in selectors:
        element = block.select_one(selector)
        if element is not None:
            return element
    return None


def _extract_snippet(block: Tag, selectors: SelectorSet, max_length: int | None) -> str:
    for selector in selectors.snippet_selectors:
        element = block.select_one(selector)
        if element is None:
            continue
        snippet = normalize_whitespace(element.get_text(" "))
        if snippet:
            return snippet[:max_length] if max_length else snippet
    return ""


def _parse_block(
    block: Tag,
    selectors: SelectorSet,
    url_filter: UrlFilter | None,
    snippet_max_length: int | None,
) -> SearchResult | None:
    title_element = _first_match(block, selectors.title_selectors)
    if title_element is None:
        return None

    title = normalize_whitespace(title_element.get_text(" "))
    href = title_element.get("href") or ""
    if isinstance(href, list):
        href = href[0] if href else ""

    if not title or not href.strip():
        return None

    url = resolve_url(href, selectors.base_url)
    if url is not None and url_filter is not None:
        url = url_filter(url)
    if url is None or len(url) < selectors.min_url_length:
        return None

    snippet = _extract_snippet(block, selectors, snippet_max_length)

    try:
        return SearchResult(
            title=title,
            url=url,
            keywords=extract_keywords(
                f"{title} {snippet}",
                min_length=3,
                limit=MAX_RESULT_KEYWORDS,
                stop_words=STOP_WORDS,
            ),
            summary=create_summary(title, snippet, url),
        )
    except ValidationError as e:
        logger.debug("Rejected result block", url=url, error=str(e))
        return None


def extract_results(
    html: str,
    selectors: SelectorSet,
    max_results: int,
    url_filter: UrlFilter | None = None,
    snippet_max_length: int | None = None,
) -> list[SearchResult]:
    """Extract search results from an upstream result page.

    Args:
        html: Raw HTML document
        selectors: Candidate selectors for the upstream
        max_results: Maximum number of results to return
        url_filter: Optional hook to rewrite or reject resolved URLs
        snippet_max_length: Optional cap on snippet length

    Returns:
        list[SearchResult]: Results in page order (may be empty)

    Raises:
        ParseError: If the document cannot be parsed at all
    """
    try:
        soup = BeautifulSoup(html, "lxml")
    except Exception as e:
        raise ParseError(f"Failed to parse result page: {e}") from e

    results: list[SearchResult] = []

    for selector in selectors.result_selectors:
        blocks = soup.select(selector)
        logger.debug(f"Selector '{selector}' found {len(blocks)} elements")

        for block in blocks:
            if len(results) >= max_results:
                break
            result = _parse_block(block, selectors, url_filter, snippet_max_length)
            if result is not None:
                results.append(result)

        if results:
            break

    logger.debug(f"Extracted {len(results)} results")
    return results
