"""Main content extraction and summarization for fetched pages."""

from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Tag

from websearch.exceptions import ParseError
from websearch.extraction.text import (
    PAGE_STOP_WORDS,
    domain_summary,
    ensure_terminal_punctuation,
    extract_domain,
    extract_keywords,
    normalize_whitespace,
    split_sentences,
)
from websearch.logging import get_logger
from websearch.models import MAX_PAGE_KEYWORDS, FetchMetadata, FetchResult

logger = get_logger("websearch.extraction.content")

UNTITLED = "Untitled Document"

TITLE_SELECTORS = (
    "title",
    "meta[property='og:title']",
    "meta[name='twitter:title']",
    "h1",
)

NOISE_SELECTORS = (
    "script, style, noscript, nav, header, footer, aside, "
    ".advertisement, .ads, .ad, .sidebar"
)

CONTENT_SELECTORS = (
    "main",
    "article",
    ".content",
    ".main-content",
    ".post-content",
    ".entry-content",
    "#content",
    "#main",
    ".container",
)

MIN_CONTAINER_LENGTH = 100
MIN_PARAGRAPH_LENGTH = 20
MIN_BEST_PARAGRAPH_LENGTH = 80
SCORED_PARAGRAPHS = 5
FIRST_PARAGRAPH_BONUS = 1.2
PAGE_SUMMARY_CAP = 300
PAGE_SUMMARY_SENTENCES = 3
FALLBACK_SUMMARY_WORDS = 50
LONG_CONTENT_LENGTH = 1000


@dataclass
class MainContent:
    """Extracted page text plus the paragraphs it was built from."""

    text: str
    paragraphs: list[str] = field(default_factory=list)


def extract_title(soup: BeautifulSoup) -> str:
    """Extract the page title, trying several sources in order.

    Args:
        soup: Parsed document

    Returns:
        str: Title, or a placeholder if none is found
    """
    for selector in TITLE_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        if element.name == "meta":
            text = element.get("content") or ""
        else:
            text = element.get_text(" ")
        text = normalize_whitespace(str(text))
        if text:
            return text
    return UNTITLED


def _paragraphs(container: Tag) -> list[str]:
    texts = (normalize_whitespace(p.get_text(" ")) for p in container.find_all("p"))
    return [t for t in texts if len(t) > MIN_PARAGRAPH_LENGTH]


def extract_main_content(soup: BeautifulSoup, max_length: int) -> MainContent:
    """Extract the main text of a page.

    Navigation, ads and other chrome are removed first. The first content
    container with enough text wins; otherwise the whole body is used.

    Args:
        soup: Parsed document (modified in place)
        max_length: Maximum characters of text to keep

    Returns:
        MainContent: Whitespace-normalized, truncated text and its paragraphs
    """
    for element in soup.select(NOISE_SELECTORS):
        # Nested matches are already gone with their parent
        if not element.decomposed:
            element.decompose()

    container: Tag | None = None
    text = ""
    for selector in CONTENT_SELECTORS:
        candidate = soup.select_one(selector)
        if candidate is None:
            continue
        candidate_text = normalize_whitespace(candidate.get_text(" "))
        if len(candidate_text) > MIN_CONTAINER_LENGTH:
            container, text = candidate, candidate_text
            logger.debug(f"Main content found with '{selector}'", length=len(text))
            break

    if container is None:
        container = soup.body or soup
        text = normalize_whitespace(container.get_text(" "))
        logger.debug("No content container matched, using body", length=len(text))

    paragraphs = _paragraphs(container) or ([text] if text else [])
    return MainContent(text=text[:max_length], paragraphs=paragraphs)


def _score_paragraph(paragraph: str, position: int) -> float:
    sentences = [s for s in split_sentences(paragraph) if len(s) > 10]
    length_score = min(len(paragraph) / 200.0, 1.0)
    sentence_score = min(len(sentences) / 3.0, 1.0)
    position_score = FIRST_PARAGRAPH_BONUS if position == 0 else 1.0
    return (length_score + sentence_score) * position_score


def _fallback_summary(content: str, title: str) -> str:
    result = " ".join(content.split()[:FALLBACK_SUMMARY_WORDS])
    if len(result) < 100:
        result = f"{title}: {result}"
    result = result.rstrip(".!? ")
    if len(result) > 200:
        return result[:197].rstrip() + "..."
    return result + "."


def create_page_summary(title: str, content: str, paragraphs: list[str], url: str) -> str:
    """Create a summary of a fetched page.

    The best of the first few paragraphs is chosen by length, sentence count
    and position, and its leading sentences form the summary.

    Args:
        title: Page title
        content: Extracted main content
        paragraphs: Candidate paragraphs in document order
        url: Page URL

    Returns:
        str: Summary ending in terminal punctuation
    """
    if len(content) < 50:
        return domain_summary(title, url)

    candidates = [p for p in paragraphs if len(p) > MIN_PARAGRAPH_LENGTH]
    if not candidates:
        return _fallback_summary(content, title)

    best = candidates[0]
    best_score = 0.0
    for position, paragraph in enumerate(candidates[:SCORED_PARAGRAPHS]):
        score = _score_paragraph(paragraph, position)
        if score > best_score and len(paragraph) > MIN_BEST_PARAGRAPH_LENGTH:
            best, best_score = paragraph, score

    summary = ""
    for sentence in split_sentences(best)[:PAGE_SUMMARY_SENTENCES]:
        candidate = f"{summary} {sentence}".strip()
        if len(candidate) > PAGE_SUMMARY_CAP:
            break
        summary = candidate

    if len(summary) < MIN_BEST_PARAGRAPH_LENGTH:
        return _fallback_summary(content, title)

    return ensure_terminal_punctuation(summary, cap=PAGE_SUMMARY_CAP)


def parse_page(
    html: str,
    url: str,
    max_length: int,
    content_type: str = "text/html",
    content_length: int | None = None,
    last_modified: str | None = None,
) -> FetchResult:
    """Run the full-page extraction pipeline.

    Args:
        html: Raw HTML document
        url: URL the document was fetched from
        max_length: Maximum characters of content to keep
        content_type: Response content type
        content_length: Response body size in bytes (defaults to len(html))
        last_modified: Last-Modified header, if any

    Returns:
        FetchResult: Title, content, summary, keywords and metadata

    Raises:
        ParseError: If the document cannot be parsed
    """
    try:
        soup = BeautifulSoup(html, "lxml")
        title = extract_title(soup)
        main = extract_main_content(soup, max_length)
    except Exception as e:
        raise ParseError(f"Failed to parse page content: {e}") from e

    min_frequency = 2 if len(main.text) > LONG_CONTENT_LENGTH else 1
    keywords = extract_keywords(
        f"{title} {main.text}",
        min_length=4,
        limit=MAX_PAGE_KEYWORDS,
        stop_words=PAGE_STOP_WORDS,
        min_frequency=min_frequency,
    )

    return FetchResult(
        url=url,
        title=title,
        content=main.text,
        summary=create_page_summary(title, main.text, main.paragraphs, url),
        keywords=keywords,
        metadata=FetchMetadata(
            domain=extract_domain(url),
            content_type=content_type,
            content_length=content_length if content_length is not None else len(html),
            last_modified=last_modified,
        ),
    )
