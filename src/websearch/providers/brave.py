"""Brave Search HTML provider."""

import re

from websearch.extraction import SelectorSet
from websearch.providers.base import SearchProvider

BRAVE_SELECTORS = SelectorSet(
    result_selectors=(
        ".snippet",
        ".web-result",
        ".result",
        "#results .fdb",
        "div[data-type='web']",
    ),
    title_selectors=(
        "h3 a",
        ".title a",
        ".result-title a",
        "a[href]",
    ),
    snippet_selectors=(
        ".snippet-description",
        ".description",
        ".snippet-content",
        "p",
    ),
    base_url="https://search.brave.com",
)

# Brave's freshness parameter values for d/w/m/y
DATE_FILTERS = {"d": "pd", "w": "pw", "m": "pm", "y": "py"}

_SITE_GROUP = re.compile(r"\(\s*(site:[^()]*?)\s*\)")


def format_query(query: str) -> str:
    """Rewrite '(site:a OR site:b)' groups into Brave's 'site:a OR site:b' form."""
    if "site:" not in query:
        return query
    return _SITE_GROUP.sub(r"\1", query)


class BraveProvider(SearchProvider):
    """Search provider for the Brave Search result page."""

    name = "Brave"
    search_url = "https://search.brave.com/search"
    selectors = BRAVE_SELECTORS

    def build_params(self, query: str, date_filter: str | None) -> dict[str, str]:
        """Build query parameters."""
        params = {"q": format_query(query)}
        if date_filter in DATE_FILTERS:
            params["tf"] = DATE_FILTERS[date_filter]
        return params

    def build_headers(self) -> dict[str, str]:
        """Build request headers.

        No Accept-Encoding is sent; the client negotiates what it can decode.
        """
        return {
            "User-Agent": self.scheduler.identity(),
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "DNT": "1",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
        }
