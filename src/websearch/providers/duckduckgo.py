"""DuckDuckGo HTML search provider."""

from urllib.parse import parse_qs, urlparse

from websearch.extraction import SelectorSet, resolve_url
from websearch.providers.base import SearchProvider

DUCKDUCKGO_SELECTORS = SelectorSet(
    result_selectors=(
        ".result:not(.result--ad)",
        ".web-result",
        ".results_links",
    ),
    title_selectors=(
        ".result__title a",
        "a.result__a",
        "h2 a",
    ),
    snippet_selectors=(
        ".result__snippet",
        ".result-snippet",
    ),
    base_url="https://duckduckgo.com",
)


class DuckDuckGoProvider(SearchProvider):
    """Search provider for the DuckDuckGo HTML endpoint."""

    name = "DuckDuckGo"
    search_url = "https://html.duckduckgo.com/html/"
    selectors = DUCKDUCKGO_SELECTORS

    def build_params(self, query: str, date_filter: str | None) -> dict[str, str]:
        """Build query parameters; 'b' starts from the first page."""
        params = {"q": query, "b": ""}
        if date_filter:
            params["df"] = date_filter
        return params

    def build_headers(self) -> dict[str, str]:
        """Build request headers.

        Accept-Encoding is set last so it overrides the supplementary
        headers: the upstream answers with brotli otherwise, which the HTTP
        client cannot decode.
        """
        headers = {
            "User-Agent": self.scheduler.identity(),
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "DNT": "1",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
            "Referer": "https://duckduckgo.com/",
        }
        headers.update(self.scheduler.supplementary_headers())
        headers["Accept-Encoding"] = "identity"
        return headers

    def clean_url(self, url: str) -> str | None:
        """Unwrap '/l/?uddg=' redirect links and drop ad links."""
        try:
            parsed = urlparse(url)
        except ValueError:
            return None
        if not parsed.netloc.endswith("duckduckgo.com"):
            return url
        if parsed.path.startswith("/l/"):
            target = parse_qs(parsed.query).get("uddg")
            if target and target[0].startswith(("http://", "https://")):
                return resolve_url(target[0], url)
        # Remaining duckduckgo.com links are ads or internal pages
        return None
