"""HTML extraction pipeline shared by search providers and the page fetcher."""

from websearch.extraction.content import (
    UNTITLED,
    MainContent,
    create_page_summary,
    extract_main_content,
    extract_title,
    parse_page,
)
from websearch.extraction.results import SelectorSet, extract_results, resolve_url
from websearch.extraction.text import (
    PAGE_STOP_WORDS,
    STOP_WORDS,
    create_summary,
    extract_domain,
    extract_keywords,
    normalize_whitespace,
)

__all__ = [
    # Results
    "SelectorSet",
    "extract_results",
    "resolve_url",
    # Pages
    "UNTITLED",
    "MainContent",
    "extract_title",
    "extract_main_content",
    "create_page_summary",
    "parse_page",
    # Text
    "STOP_WORDS",
    "PAGE_STOP_WORDS",
    "extract_keywords",
    "create_summary",
    "extract_domain",
    "normalize_whitespace",
]
