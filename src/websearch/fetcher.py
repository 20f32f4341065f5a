"""Web page fetcher and content extractor."""

from urllib.parse import urlparse

import httpx

from websearch.exceptions import ParseError, RequestValidationError, UpstreamError
from websearch.extraction import UNTITLED, extract_domain, parse_page
from websearch.extraction.text import domain_summary
from websearch.logging import get_logger
from websearch.models import FetchMetadata, FetchResult

logger = get_logger("websearch.fetcher")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def validate_url(url: str) -> str:
    """Require an absolute http(s) URL.

    Raises:
        RequestValidationError: If the URL is empty or not http(s)
    """
    url = (url or "").strip()
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise RequestValidationError("Valid URL parameter is required") from e
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise RequestValidationError("Valid URL parameter is required")
    return url


class ContentFetcher:
    """Async web page fetcher with content extraction.

    Downloads a single page and extracts its title, main text, summary and
    keywords. There is no fallback: upstream failures surface directly.
    """

    def __init__(
        self,
        max_length: int = 5000,
        timeout: float = 10.0,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the fetcher.

        Args:
            max_length: Maximum characters of content to return
            timeout: Request timeout in seconds
            user_agent: Optional custom user agent string
            transport: Optional httpx transport (used by tests)
        """
        self.max_length = max_length
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self._transport = transport

    async def fetch(self, url: str) -> FetchResult:
        """Fetch and extract content from a web page.

        Args:
            url: URL to fetch

        Returns:
            FetchResult: Extracted page content

        Raises:
            RequestValidationError: If the URL is invalid
            UpstreamError: If the request fails or the body is empty
        """
        url = validate_url(url)
        logger.info(f"Fetching web page: {url}")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                    "Accept-Language": "en-US,en;q=0.5",
                    "Accept-Encoding": "gzip, deflate",
                },
            ) as client:
                response = await client.get(url)
                response.raise_for_status()

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"HTTP error fetching {url}: {status}")
            raise UpstreamError(f"HTTP {status} fetching {url}", source=url, status_code=status) from e
        except httpx.TimeoutException as e:
            logger.error(f"Timed out fetching {url}")
            raise UpstreamError(f"Timed out after {self.timeout}s fetching {url}", source=url) from e
        except httpx.RequestError as e:
            logger.error(f"Request error fetching {url}: {e}")
            raise UpstreamError(f"Request failed: {e}", source=url) from e

        html = response.text
        if not html.strip():
            raise UpstreamError(f"Empty response from {url}", source=url, status_code=response.status_code)

        content_type = response.headers.get("content-type", "text/html").split(";")[0].strip()
        last_modified = response.headers.get("last-modified")
        content_length = len(response.content)

        try:
            result = parse_page(
                html,
                url,
                self.max_length,
                content_type=content_type or "text/html",
                content_length=content_length,
                last_modified=last_modified,
            )
        except ParseError as e:
            logger.warning(f"Returning best-effort result for {url}: {e}")
            result = FetchResult(
                url=url,
                title=UNTITLED,
                content="",
                summary=domain_summary(UNTITLED, url),
                keywords=[],
                metadata=FetchMetadata(
                    domain=extract_domain(url),
                    content_type=content_type or "text/html",
                    content_length=content_length,
                    last_modified=last_modified,
                ),
            )

        logger.info(f"Extracted {len(result.content)} characters from {url}")
        return result
