"""Base class for scrape-based search providers."""

from abc import ABC, abstractmethod
from typing import Any

import httpx

from websearch.exceptions import ParseError, ProviderError
from websearch.extraction import SelectorSet, extract_results
from websearch.logging import AsyncTimer, get_logger
from websearch.models import SearchResult
from websearch.politeness import PolitenessScheduler

logger = get_logger("websearch.providers")


class SearchProvider(ABC):
    """Abstract base class for upstream search providers.

    A provider turns a query into an upstream request, waits for the
    politeness scheduler, fetches the result page and hands it to the
    extraction pipeline with its own selector lists.

    Subclasses must define:
    - name, search_url, selectors - class attributes
    - build_params() - upstream query parameters
    - build_headers() - upstream request headers
    """

    name: str
    search_url: str
    selectors: SelectorSet

    def __init__(
        self,
        scheduler: PolitenessScheduler,
        timeout: float = 15.0,
        snippet_max_length: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the provider.

        Args:
            scheduler: Politeness scheduler gating every upstream request
            timeout: Request timeout in seconds
            snippet_max_length: Optional cap on snippet length
            transport: Optional httpx transport (used by tests)
        """
        self.scheduler = scheduler
        self.timeout = timeout
        self.snippet_max_length = snippet_max_length
        self._transport = transport

    @abstractmethod
    def build_params(self, query: str, date_filter: str | None) -> dict[str, str]:
        """Build upstream query parameters."""

    @abstractmethod
    def build_headers(self) -> dict[str, str]:
        """Build upstream request headers."""

    def clean_url(self, url: str) -> str | None:
        """Rewrite or reject a resolved result URL.

        Returns:
            str | None: URL to keep, or None to drop the result
        """
        return url

    async def search(
        self,
        query: str,
        max_results: int,
        date_filter: str | None = None,
    ) -> list[SearchResult]:
        """Search the upstream.

        Args:
            query: Search query string
            max_results: Maximum number of results to return
            date_filter: Date filter ('d', 'w', 'm', 'y')

        Returns:
            list[SearchResult]: Results in upstream order (may be empty)

        Raises:
            ProviderError: If the upstream request or parsing fails
        """
        params = self.build_params(query, date_filter)

        await self.scheduler.acquire()
        headers = self.build_headers()

        async with AsyncTimer(f"{self.name} search", logger, slow_after=self.timeout / 2):
            html = await self._get(params, headers)

        try:
            results = extract_results(
                html,
                self.selectors,
                max_results,
                url_filter=self.clean_url,
                snippet_max_length=self.snippet_max_length,
            )
        except ParseError as e:
            raise ProviderError(self.name, str(e)) from e

        logger.info(f"{self.name} returned {len(results)} results", query=query)
        return results

    async def _get(self, params: dict[str, Any], headers: dict[str, str]) -> str:
        """Issue the upstream GET request.

        Raises:
            ProviderError: On non-2xx, empty body, timeout or network failure
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(self.search_url, params=params, headers=headers)
                response.raise_for_status()
                html = response.text

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(f"{self.name} returned HTTP {status}")
            raise ProviderError(self.name, f"HTTP {status}", status_code=status) from e
        except httpx.TimeoutException as e:
            logger.warning(f"{self.name} request timed out")
            raise ProviderError(self.name, f"Request timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            logger.warning(f"{self.name} request failed: {e}")
            raise ProviderError(self.name, f"Request failed: {e}") from e

        if not html.strip():
            raise ProviderError(self.name, f"Empty response from {self.name}")

        return html

    def __repr__(self) -> str:
        """String representation of the provider."""
        return f"<{self.__class__.__name__} name='{self.name}'>"
