"""Primary/secondary provider orchestration.

Each search goes to the primary provider unless it is suspended. A primary
failure suspends it with exponential backoff and the same request is retried
once on the secondary provider. Empty results never count as a failure:
legitimate queries can have no matches.
"""

from typing import Callable

from pydantic import ValidationError

from websearch.exceptions import AllProvidersFailedError, RequestValidationError
from websearch.health import ProviderHealthState
from websearch.logging import get_logger
from websearch.models import SearchQuery, SearchResponse, SearchResult
from websearch.providers import SearchProvider

logger = get_logger("websearch.orchestrator")

QueryEnhancer = Callable[[str], str]


def validate_query(
    query: str,
    max_results: int | None = None,
    date_filter: str | None = None,
) -> SearchQuery:
    """Validate raw search input.

    Raises:
        RequestValidationError: If any field is invalid
    """
    try:
        return SearchQuery(query=query, max_results=max_results, date_filter=date_filter)
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise RequestValidationError(f"Invalid search request: {messages}") from e


class SearchOrchestrator:
    """Routes searches between a primary and a secondary provider."""

    def __init__(
        self,
        primary: SearchProvider,
        secondary: SearchProvider,
        health: ProviderHealthState,
        enhancer: QueryEnhancer | None = None,
        default_max_results: int = 10,
    ):
        """Initialize the orchestrator.

        Args:
            primary: Preferred provider
            secondary: Fallback provider
            health: Suspension state of the primary provider
            enhancer: Optional query rewrite applied before dispatch
            default_max_results: Result count when the request gives none
        """
        self.primary = primary
        self.secondary = secondary
        self.health = health
        self.enhancer = enhancer
        self.default_max_results = default_max_results

    @property
    def suspended_tag(self) -> str:
        """Provider tag used while the primary is suspended."""
        return f"{self.secondary.name} ({self.primary.name} suspended)"

    async def search(
        self,
        query: str,
        max_results: int | None = None,
        date_filter: str | None = None,
    ) -> SearchResponse:
        """Search with primary-first routing and a single fallback.

        Args:
            query: Search query string
            max_results: Maximum number of results (1-50)
            date_filter: Date filter ('d', 'w', 'm', 'y')

        Returns:
            SearchResponse: Results tagged with the provider that served them

        Raises:
            RequestValidationError: If the request is invalid
            AllProvidersFailedError: If no provider could serve the search
        """
        request = validate_query(query, max_results, date_filter)
        limit = request.max_results or self.default_max_results

        enhanced = self.enhancer(request.query) if self.enhancer else request.query
        display_query = (
            request.query if enhanced == request.query
            else f"{request.query} (enhanced: {enhanced})"
        )

        if self.health.is_suspended():
            logger.info(
                f"{self.primary.name} suspended, using {self.secondary.name}",
                remaining_s=round(self.health.remaining()),
            )
            results = await self._search_secondary(enhanced, limit, request.date_filter, [])
            return self._response(display_query, self.suspended_tag, results)

        try:
            results = await self.primary.search(enhanced, limit, request.date_filter)
        except Exception as primary_error:
            logger.warning(
                f"{self.primary.name} failed, falling back to {self.secondary.name}",
                error=str(primary_error),
                exc_info=True,
            )
            self.health.record_failure()
            results = await self._search_secondary(
                enhanced, limit, request.date_filter, [primary_error]
            )
            return self._response(display_query, self.secondary.name, results)

        self.health.record_success()
        return self._response(display_query, self.primary.name, results)

    async def _search_secondary(
        self,
        query: str,
        limit: int,
        date_filter: str | None,
        errors: list[Exception],
    ) -> list[SearchResult]:
        try:
            return await self.secondary.search(query, limit, date_filter)
        except Exception as secondary_error:
            logger.error(
                f"{self.secondary.name} failed",
                error=str(secondary_error),
                exc_info=True,
            )
            raise AllProvidersFailedError([*errors, secondary_error]) from secondary_error

    def _response(self, query: str, provider: str, results: list[SearchResult]) -> SearchResponse:
        return SearchResponse(
            query=query,
            total_results=len(results),
            search_provider=provider,
            results=results,
        )
